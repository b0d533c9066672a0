"""Jolokia (JMX over HTTP/JSON) transport."""

from .client import JolokiaInvoker

__all__ = ["JolokiaInvoker"]

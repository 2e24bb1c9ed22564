"""TCP daytime, chat and nickname servers and clients for IPv4 and IPv6."""

__version__ = "0.1.0"
__all__ = ["common", "daytime", "chat", "nickname"]
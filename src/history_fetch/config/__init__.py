"""Configuration loading."""

from .loader import BatchFile, ClientConfig, QueryEntry, load_batch_file, load_client_config

__all__ = ["BatchFile", "ClientConfig", "QueryEntry", "load_batch_file", "load_client_config"]

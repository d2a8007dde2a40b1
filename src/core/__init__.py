"""
Core business logic for the video library.

This module is framework-agnostic - it doesn't import FastAPI or boto3.
Storage is reached only through the StorageClient protocol.
"""

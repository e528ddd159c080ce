"""Serverless relay that runs a packaged executable per invocation."""
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("relay")

# premium_engine/api/lambda_handler.py
"""
AWS Lambda handler for FastAPI using Mangum (ASGI adapter).

How it works:
- API Gateway invokes Lambda
- Mangum translates the event into an ASGI request
- FastAPI handles routing (/health, /assess, /quote, /analysis)
- Response is returned back to API Gateway

The factor catalog is validated when premium_engine.risk.catalog is imported,
so a broken catalog fails the cold start instead of the first request.
"""

from __future__ import annotations

from mangum import Mangum

from premium_engine.api.app import app
from premium_engine.utils.logging_config import setup_logging


setup_logging()

handler = Mangum(app)

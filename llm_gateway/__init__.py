from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import HttpClient, HttpResponse, LlmGatewayError, as_model, call, chat

__all__ = ["HttpClient", "HttpResponse", "LlmGatewayError", "as_model", "call", "chat"]

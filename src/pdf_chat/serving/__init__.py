"""
Serving — FastAPI application for PDF ingestion and streamed answers.

Run with ``uvicorn pdf_chat.serving.app:app``.
"""

"""Main entry point for DocQA RAG service API."""
import asyncio
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import List
from fastapi import FastAPI, HTTPException, UploadFile, File, Header, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from config import PORT, CORS_ORIGINS, GROQ_API_KEY, LOG_FORMAT, LOG_LEVEL, UPLOAD_DIR
from logger import setup_logging
from models.api import (
    AskRequest,
    AskResponse,
    Block,
    DocumentInfo,
    HealthResponse,
    MessageResponse,
    Source,
    UploadResponse,
)
from models.document import Document
from services.answer_generator import AnswerGenerator
from services.document_store import CorruptIndexError, DocumentStore
from services.llm_client import LLMClient
from services.retrieval_engine import RetrievalEngine

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="DocQA RAG Service",
    description="Question answering over uploaded documents",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
document_store: DocumentStore = None
answer_generator: AnswerGenerator = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global document_store, answer_generator

    if LOG_FORMAT == "json":
        setup_logging(LOG_LEVEL)

    logger.info("Initializing DocQA RAG services...")

    try:
        document_store = DocumentStore(UPLOAD_DIR)
        logger.info("Initialized DocumentStore")

        retrieval_engine = RetrievalEngine(document_store)

        llm_client = None
        if GROQ_API_KEY:
            llm_client = LLMClient(GROQ_API_KEY)
        else:
            logger.warning("GROQ_API_KEY not configured, question answering is disabled")

        answer_generator = AnswerGenerator(document_store, retrieval_engine, llm_client)
        logger.info("Initialized AnswerGenerator")

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


def get_session_key(x_session_id: str = Header("default")) -> str:
    """Resolve the session key from the X-Session-Id header."""
    if not DocumentStore.SESSION_KEY_PATTERN.match(x_session_id):
        raise HTTPException(status_code=400, detail="Invalid session id")
    return x_session_id


def _document_info(document: Document) -> DocumentInfo:
    return DocumentInfo(
        id=document.id,
        name=document.name,
        size=document.size_bytes,
        upload_date=document.uploaded_at
    )


@app.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check with dependent service status."""
    generation_available = answer_generator is not None and answer_generator.generation_available
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        services={
            "storage": "operational" if document_store is not None else "unavailable",
            "llm": "connected" if generation_available else "disconnected"
        }
    )


@app.post("/api/upload", response_model=UploadResponse, status_code=201)
async def upload_document(
    file: UploadFile = File(None),
    session_key: str = Depends(get_session_key)
) -> UploadResponse:
    """Store an uploaded document for the session."""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    content = await file.read()
    try:
        document = await asyncio.to_thread(document_store.add_document, session_key, file.filename, content)
    except CorruptIndexError as e:
        logger.error(f"Upload rejected: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return UploadResponse(message="File uploaded successfully", document=_document_info(document))


@app.get("/api/documents", response_model=List[DocumentInfo])
async def list_documents(session_key: str = Depends(get_session_key)) -> List[DocumentInfo]:
    """List the session's documents in upload order."""
    documents = await asyncio.to_thread(document_store.list_documents, session_key)
    return [_document_info(document) for document in documents]


@app.get("/api/documents/{doc_id}/download")
async def download_document(doc_id: str, session_key: str = Depends(get_session_key)):
    """Return the stored file for a document."""
    document = await asyncio.to_thread(document_store.get_document, session_key, doc_id)
    if document is None or not Path(document.content_location).is_file():
        raise HTTPException(status_code=404, detail="Document not found")
    return FileResponse(document.content_location, filename=document.name)


@app.delete("/api/documents/{doc_id}", response_model=MessageResponse)
async def delete_document(doc_id: str, session_key: str = Depends(get_session_key)) -> MessageResponse:
    """Delete a document and its stored file."""
    try:
        deleted = await asyncio.to_thread(document_store.delete_document, session_key, doc_id)
    except CorruptIndexError as e:
        logger.error(f"Delete rejected: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Document not found")
    return MessageResponse(message="Document deleted successfully")


@app.post("/api/ask", response_model=AskResponse)
async def ask_endpoint(
    request: AskRequest,
    session_key: str = Depends(get_session_key)
) -> AskResponse:
    """
    Answer a question from the session's documents.

    Retrieves matching chunks, asks the LLM to answer from them and falls
    back to an extractive summary when generation fails.

    Args:
        request: AskRequest with the question

    Returns:
        AskResponse with answer, sources, model label and structured blocks

    Raises:
        HTTPException: For validation errors, missing configuration or internal failures
    """
    start_time = time.time()

    if not request.question.strip():
        raise HTTPException(status_code=400, detail="Question is required")

    if not answer_generator.generation_available:
        raise HTTPException(
            status_code=503,
            detail="AI service not configured. Please add GROQ_API_KEY to .env file."
        )

    try:
        logger.info(f"Processing question: {request.question[:100]}...")
        answer = await answer_generator.answer(request.question, session_key)

        response = AskResponse(
            answer=answer.text,
            sources=[
                Source(
                    document_id=citation.document_id,
                    document_name=citation.document_name,
                    snippet=citation.snippet,
                    score=citation.score
                )
                for citation in answer.sources
            ],
            model=answer.model_label,
            blocks=[
                Block(
                    kind=block.kind.value,
                    text=block.text,
                    items=block.items,
                    document_name=block.document_name,
                    index=block.index
                )
                for block in answer.blocks
            ]
        )

        total_latency_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Question answered ({answer.state.value}) in {total_latency_ms}ms")
        return response

    except Exception as e:
        logger.error(f"Unexpected error processing question: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Internal processing error: {str(e)}"
        )


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting DocQA RAG API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)

"""Document center endpoints."""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from src.api.dependencies import get_client
from src.services.errors import CollaboratorError
from src.services.insights.client import InsightsClient
from src.services.insights.models import Document

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[Document])
async def list_documents(
    client: InsightsClient = Depends(get_client),
) -> list[Document]:
    """List uploaded documents."""
    return await client.fetch_documents()


@router.post("/", response_model=Document, status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    client: InsightsClient = Depends(get_client),
) -> Document:
    """Upload a document."""
    content = await file.read()
    try:
        return await client.upload_document(file.filename or "", len(content))
    except CollaboratorError as e:
        logger.error("Document upload failed: %s", e)
        raise HTTPException(status_code=400, detail=str(e)) from e

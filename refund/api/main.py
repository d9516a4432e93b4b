from fastapi import FastAPI, HTTPException, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from pathlib import Path
import os
import logging

from ..extraction.refund_document_extractor import RefundDocumentExtractor, get_refund_extractor
from ..extraction.document_fields.support_modules.layout_detector import FORM_LAYOUTS
from ..standardization.field_validator import FieldValidator

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Refund Document Extraction API",
    description="API for extracting customer name, refund amount, IBAN and service number from refund request documents.",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

validator = FieldValidator()

DOCUMENTS_DIR_ENV_VAR = 'REFUND_DOCUMENTS_DIR'
DEFAULT_DOCUMENTS_DIR = 'documents'


def get_documents_dir() -> Path:
    """Only files under this directory may be sent for text extraction."""
    return Path(os.getenv(DOCUMENTS_DIR_ENV_VAR) or DEFAULT_DOCUMENTS_DIR).resolve()


# Pydantic models
class ExtractionRequest(BaseModel):
    text: str = Field(..., description="Raw text of the refund document")
    file_name: str = Field("document.txt", description="Name of the source document")

class FileExtractionRequest(BaseModel):
    file_path: str = Field(..., description="Path of the document, relative to the documents directory")

class CorrectionRequest(BaseModel):
    field_type: str = Field(..., description="customerName, refundAmount, ibanNumber or customerServiceNumber")
    original_value: str
    corrected_value: str
    document_id: str
    context: Optional[str] = Field(None, description="Surrounding document text used to learn a pattern")

class TrainingExampleRequest(BaseModel):
    field_type: str
    value: str
    pattern: Optional[str] = None
    confidence: float = Field(90, ge=0, le=100)
    context: Optional[str] = None

class PatternRequest(BaseModel):
    field_type: str
    pattern_regex: str
    priority: int = Field(5, description="Lower value = higher precedence")
    success_rate: float = Field(60, ge=0, le=100)

class ValidationRequest(BaseModel):
    customer_name: str = ""
    refund_amount: str = ""
    iban_number: str = ""
    customer_service_number: str = ""


def _bad_request(e: Exception) -> HTTPException:
    return HTTPException(status_code=400, detail=str(e))


@app.on_event("startup")
async def startup_event():
    """Initialize the extractor and pattern registry on startup."""
    try:
        get_refund_extractor()
        logger.info("Refund extractor initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize refund extractor: {e}")

@app.post("/extract", response_model=Dict[str, Any])
async def extract_document(request: ExtractionRequest,
                           extractor: RefundDocumentExtractor = Depends(get_refund_extractor)):
    """Extract the four refund fields and the detected layout from document text."""
    try:
        return extractor.process_document_text(request.text, request.file_name).to_dict()
    except Exception as e:
        logger.error(f"Extraction failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

@app.post("/extract/file", response_model=Dict[str, Any])
async def extract_document_file(request: FileExtractionRequest,
                                extractor: RefundDocumentExtractor = Depends(get_refund_extractor),
                                documents_dir: Path = Depends(get_documents_dir)):
    """Send a document from the documents directory through the text-extraction service, then extract."""
    document = (documents_dir / request.file_path).resolve()
    if documents_dir not in document.parents:
        logger.warning(f"Rejected document path outside {documents_dir}: {request.file_path}")
        raise HTTPException(status_code=403, detail="File path must be inside the documents directory")
    return extractor.process_document_file(str(document)).to_dict()

@app.post("/corrections", response_model=Dict[str, Any])
async def record_correction(request: CorrectionRequest,
                            extractor: RefundDocumentExtractor = Depends(get_refund_extractor)):
    """Record a user correction and feed it back into the pattern registry."""
    try:
        record = extractor.record_correction(
            request.field_type,
            request.original_value,
            request.corrected_value,
            request.document_id,
            request.context
        )
        return record.to_dict()
    except ValueError as e:
        raise _bad_request(e)
    except Exception as e:
        logger.error(f"Failed to record correction: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.post("/training-examples", response_model=Dict[str, Any])
async def add_training_example(request: TrainingExampleRequest,
                               extractor: RefundDocumentExtractor = Depends(get_refund_extractor)):
    try:
        example = extractor.pattern_learner.add_training_example(
            field_type=request.field_type,
            pattern=request.pattern or request.field_type,
            value=request.value,
            confidence=request.confidence,
            context=request.context
        )
        return example.to_dict()
    except ValueError as e:
        raise _bad_request(e)

@app.get("/insights", response_model=Dict[str, Any])
async def get_insights(extractor: RefundDocumentExtractor = Depends(get_refund_extractor)):
    """Correction statistics and recently added patterns."""
    try:
        return extractor.pattern_learner.generate_insights()
    except Exception as e:
        logger.error(f"Failed to generate insights: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.get("/patterns/{field_type}", response_model=List[Dict[str, Any]])
async def get_patterns(field_type: str, extractor: RefundDocumentExtractor = Depends(get_refund_extractor)):
    try:
        return [p.to_dict() for p in extractor.pattern_registry.get_extraction_patterns(field_type)]
    except ValueError as e:
        raise _bad_request(e)

@app.post("/patterns", response_model=Dict[str, Any])
async def add_pattern(request: PatternRequest, extractor: RefundDocumentExtractor = Depends(get_refund_extractor)):
    """Add a custom pattern. Malformed patterns are stored but stay inactive."""
    try:
        pattern = extractor.pattern_registry.add_pattern(
            field_type=request.field_type,
            pattern_regex=request.pattern_regex,
            priority=request.priority,
            success_rate=request.success_rate
        )
        return pattern.to_dict()
    except ValueError as e:
        raise _bad_request(e)

@app.delete("/patterns/{pattern_id}")
async def delete_pattern(pattern_id: int, extractor: RefundDocumentExtractor = Depends(get_refund_extractor)):
    if not extractor.pattern_registry.delete_pattern(pattern_id):
        raise HTTPException(status_code=404, detail=f"Pattern {pattern_id} not found")
    return {"status": "success", "deleted": pattern_id}

@app.get("/similar", response_model=List[Dict[str, Any]])
async def find_similar(text: str = Query(..., min_length=1),
                       field_type: Optional[str] = None,
                       extractor: RefundDocumentExtractor = Depends(get_refund_extractor)):
    """Training examples that resemble the given text."""
    try:
        return [e.to_dict() for e in extractor.pattern_learner.find_similar_patterns(text, field_type)]
    except ValueError as e:
        raise _bad_request(e)

@app.post("/validate", response_model=Dict[str, Any])
async def validate_fields(request: ValidationRequest):
    return validator.validate_extraction_data({
        'customerName': request.customer_name,
        'refundAmount': request.refund_amount,
        'ibanNumber': request.iban_number,
        'customerServiceNumber': request.customer_service_number
    })

@app.get("/layouts", response_model=List[Dict[str, Any]])
async def list_layouts():
    return [layout.to_dict() for layout in FORM_LAYOUTS]

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "refund-extraction-api", "version": "1.0.0"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("refund.api.main:app", host="0.0.0.0", port=8000, reload=False)

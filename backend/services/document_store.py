"""Session-scoped flat file storage for uploaded documents."""
import json
import logging
import re
import threading
import time
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from models.document import Document
from config import UPLOAD_DIR

logger = logging.getLogger(__name__)


class InvalidSessionKeyError(ValueError):
    """Raised when a session key cannot be used as a storage directory name."""


class CorruptIndexError(RuntimeError):
    """Raised when a session index cannot be parsed and must not be overwritten."""


class DocumentStore:
    """Stores each session's uploads in its own directory with a JSON index."""

    INDEX_FILENAME = "documents.json"
    SESSION_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

    def __init__(self, base_directory: Union[str, Path] = UPLOAD_DIR):
        """
        Initialize DocumentStore.

        Args:
            base_directory: Root directory holding one subdirectory per session
        """
        self.base_directory = Path(base_directory)
        self.base_directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        logger.info(f"Upload directory ensured at: {self.base_directory}")

    def list_documents(self, session_key: str) -> List[Document]:
        """Return the session's documents in upload order."""
        return self._read_index(self._session_directory(session_key))

    def get_document(self, session_key: str, doc_id: str) -> Optional[Document]:
        """Return a single document, or None if the session has no such document."""
        for document in self.list_documents(session_key):
            if document.id == doc_id:
                return document
        return None

    def add_document(self, session_key: str, filename: str, content: bytes) -> Document:
        """
        Save an uploaded file and register it in the session index.

        Args:
            session_key: Owning session
            filename: Original client-side file name
            content: Raw file bytes

        Returns:
            The stored Document
        """
        session_directory = self._session_directory(session_key)
        name = Path(filename).name or "upload"

        with self._lock:
            documents = self._read_index(session_directory, strict=True)

            session_directory.mkdir(parents=True, exist_ok=True)
            stored_path = session_directory / f"{int(time.time() * 1000)}-{name}"
            stored_path.write_bytes(content)

            document = Document(
                id=f"doc_{uuid.uuid4().hex[:12]}",
                name=name,
                size_bytes=len(content),
                uploaded_at=datetime.now(),
                content_location=str(stored_path)
            )
            documents.append(document)
            self._write_index(session_directory, documents)

        logger.info(f"Stored document {document.id} ({name}, {len(content)} bytes) for session {session_key}")
        return document

    def delete_document(self, session_key: str, doc_id: str) -> bool:
        """
        Remove a document and its file.

        Returns:
            True if the document existed, False otherwise
        """
        session_directory = self._session_directory(session_key)

        with self._lock:
            documents = self._read_index(session_directory, strict=True)
            remaining = [document for document in documents if document.id != doc_id]
            if len(remaining) == len(documents):
                logger.warning(f"Attempted to delete unknown document {doc_id} in session {session_key}")
                return False

            self._write_index(session_directory, remaining)
            for document in documents:
                if document.id == doc_id:
                    Path(document.content_location).unlink(missing_ok=True)

        logger.info(f"Deleted document {doc_id} from session {session_key}")
        return True

    def read_content(self, document: Document) -> str:
        """
        Read a document's text content.

        Read failures are logged and yield an empty string, so an unreadable
        document simply contributes nothing to retrieval.
        """
        try:
            return Path(document.content_location).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error reading file {document.content_location}: {e}")
            return ""

    def _session_directory(self, session_key: str) -> Path:
        if not session_key or not self.SESSION_KEY_PATTERN.match(session_key):
            raise InvalidSessionKeyError(f"Invalid session key: {session_key!r}")
        return self.base_directory / session_key

    def _read_index(self, session_directory: Path, strict: bool = False) -> List[Document]:
        """
        Load the session index.

        A corrupt index reads as empty, unless ``strict`` is set, in which case
        CorruptIndexError is raised so callers about to rewrite the index
        leave it untouched.
        """
        index_path = session_directory / self.INDEX_FILENAME
        if not index_path.exists():
            return []
        try:
            entries = json.loads(index_path.read_text(encoding="utf-8"))
            if not isinstance(entries, list):
                raise ValueError(f"expected a list, got {type(entries).__name__}")
            return [Document.from_dict(entry) for entry in entries]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Could not read document index {index_path}: {e}")
            if strict:
                raise CorruptIndexError(f"Document index for {session_directory.name} is unreadable") from e
            return []

    def _write_index(self, session_directory: Path, documents: List[Document]) -> None:
        index_path = session_directory / self.INDEX_FILENAME
        temp_path = index_path.with_suffix(".tmp")
        temp_path.write_text(
            json.dumps([document.to_dict() for document in documents], indent=2),
            encoding="utf-8"
        )
        temp_path.replace(index_path)

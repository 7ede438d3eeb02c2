"""
CareScope Signature Capture
Drawing-surface collaborator producing opaque signature image references
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class SignatureSurface:
    """A drawing surface held open for one signer"""

    def __init__(self, role: str):
        self.role = role
        self.image: Optional[str] = None

    def accept(self, image: Optional[str]) -> None:
        self.image = image or None

    def clear(self) -> None:
        self.image = None


class SignatureCapture(ABC):
    """
    Source of signature images.

    The image is an opaque reference (typically a data URL). The lifecycle
    engine stores and forwards it without inspecting it.
    """

    @contextmanager
    def surface(self, role: str) -> Iterator[SignatureSurface]:
        """Acquire a drawing surface; it is released when the block exits"""
        pad = SignatureSurface(role)
        try:
            yield pad
        finally:
            logger.debug(f"Released {role} signature surface (captured={pad.image is not None})")

    @abstractmethod
    def draw(self, pad: SignatureSurface, typed_name: str) -> None:
        """Fill the surface for the named signer"""

    def capture(self, role: str, typed_name: str) -> Optional[str]:
        """Run one capture session; returns the image reference or None when left blank"""
        with self.surface(role) as pad:
            self.draw(pad, typed_name)
        return pad.image


class PrecapturedSignatures(SignatureCapture):
    """Images already captured client-side and submitted with the request"""

    def __init__(self, images: Optional[Dict[str, Optional[str]]] = None):
        self.images = dict(images or {})
        self.sessions: List[str] = []

    def draw(self, pad: SignatureSurface, typed_name: str) -> None:
        self.sessions.append(pad.role)
        pad.accept(self.images.get(pad.role))

"""State management utilities for the Lamina UI.

This module handles the initialization of per-session UI state: the remote
image client and the saved-lamina store. The store is process-wide: every
session gets the same :class:`SavedImageStore`, so all of them see one
collection.
"""

import logging
import threading
from pathlib import Path

from lamina.core.config import config
from lamina.core.gallery_store import SavedImageStore
from lamina.core.gemini_client import GeminiImageClient

from .models import UIState

logger = logging.getLogger(__name__)

# Shared saved-lamina stores, one per collection file
_shared_stores: dict[Path, SavedImageStore] = {}
_stores_lock = threading.Lock()


def get_shared_store(path: Path) -> SavedImageStore:
    """Return the process-wide store for ``path``, loading it on first use."""
    path = Path(path)
    with _stores_lock:
        store = _shared_stores.get(path)
        if store is None:
            logger.info(f"Loading saved laminas from {path}")
            store = SavedImageStore(path)
            store.load()
            _shared_stores[path] = store
        return store


def initialize_ui_state(state: UIState | None = None) -> UIState:
    """Initialize or ensure UI state is ready.

    Components are created lazily. The client is per session; the store is
    shared by all sessions and loaded once per process.

    Args:
        state: Existing UIState or None

    Returns:
        Initialized UIState instance

    Raises:
        MissingCredentialError: If no Gemini API key is configured
    """
    if state is None:
        logger.info("Creating new UIState")
        state = UIState()

    if state.is_initialized():
        logger.debug("UIState already initialized")
        return state

    logger.info("Initializing UIState components...")

    try:
        if state.client is None:
            logger.info("Initializing GeminiImageClient")
            state.client = GeminiImageClient.from_config(config)

        if state.store is None:
            state.store = get_shared_store(config.saved_images_path)

        logger.info(f"UIState initialization complete: {state}")
        return state

    except Exception as e:
        logger.error(f"Error initializing UIState: {e}", exc_info=True)
        raise

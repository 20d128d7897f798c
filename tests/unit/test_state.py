"""Unit tests for UI state initialization."""

from unittest.mock import Mock, patch

import pytest

from lamina.core.errors import MissingCredentialError
from lamina.core.gallery_store import SavedImageStore
from lamina.ui.models import UIState
from lamina.ui.state import get_shared_store, initialize_ui_state


class TestInitializeUIState:
    """Tests for initialize_ui_state."""

    @patch("lamina.ui.state.GeminiImageClient")
    def test_creates_state_and_components(self, mock_client_cls, test_config):
        mock_client_cls.from_config.return_value = Mock()

        with patch("lamina.ui.state.config", test_config):
            state = initialize_ui_state(None)

        assert isinstance(state, UIState)
        assert state.client is mock_client_cls.from_config.return_value
        assert isinstance(state.store, SavedImageStore)
        assert state.store.path == test_config.saved_images_path
        mock_client_cls.from_config.assert_called_once_with(test_config)

    @patch("lamina.ui.state.GeminiImageClient")
    def test_loads_saved_collection(self, mock_client_cls, test_config):
        SavedImageStore(test_config.saved_images_path).add("abc", "normal", now_ms=1)

        with patch("lamina.ui.state.config", test_config):
            state = initialize_ui_state(UIState())

        assert [image.id for image in state.store.images] == ["lamina-1"]

    @patch("lamina.ui.state.GeminiImageClient")
    def test_already_initialized_is_untouched(self, mock_client_cls, initialized_state):
        client = initialized_state.client

        state = initialize_ui_state(initialized_state)

        assert state is initialized_state
        assert state.client is client
        mock_client_cls.from_config.assert_not_called()

    @patch("lamina.ui.state.GeminiImageClient")
    def test_missing_credential_propagates(self, mock_client_cls, test_config):
        mock_client_cls.from_config.side_effect = MissingCredentialError("no key")

        with patch("lamina.ui.state.config", test_config):
            with pytest.raises(MissingCredentialError):
                initialize_ui_state(UIState())


class TestSharedStore:
    """All sessions share one saved-lamina store."""

    @patch("lamina.ui.state.GeminiImageClient")
    def test_sessions_get_the_same_store(self, mock_client_cls, test_config):
        with patch("lamina.ui.state.config", test_config):
            first = initialize_ui_state(UIState())
            second = initialize_ui_state(UIState())

        assert first.store is second.store

    @patch("lamina.ui.state.GeminiImageClient")
    def test_saves_from_two_sessions_both_survive(self, mock_client_cls, test_config):
        with patch("lamina.ui.state.config", test_config):
            first = initialize_ui_state(UIState())
            second = initialize_ui_state(UIState())

        first.store.add("a", "normal", now_ms=1)
        second.store.add("b", "improved", now_ms=2)

        reloaded = SavedImageStore(test_config.saved_images_path).load()
        assert sorted(image.id for image in reloaded) == ["lamina-1", "lamina-2"]

    def test_get_shared_store_loads_once(self, temp_dir):
        path = temp_dir / "shared.json"
        SavedImageStore(path).add("a", "normal", now_ms=1)

        store = get_shared_store(path)

        assert [image.id for image in store.images] == ["lamina-1"]
        assert get_shared_store(path) is store

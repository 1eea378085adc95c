"""Tests for audio upload, transcription and voice filter endpoints."""

import io
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import ExternalServiceError, ExternalServiceKind
from app.models.audio_record import AudioRecord
from app.models.post import Post
from app.services import transcription_client as transcription_client_module
from app.services.audio_codec import encode_data_uri
from app.services.transcription_client import TranscriptionClient

SAMPLE_AUDIO = b"\x1a\x45\xdf\xa3" + b"\x00" * 1020
SAMPLE_DATA_URI = encode_data_uri(SAMPLE_AUDIO, "audio/webm")
TRANSCRIBE = "app.services.transcription_client.TranscriptionClient.transcribe"


def _upload(client: TestClient, user_id: int, filename: str = "voz.mp3", mime: str = "audio/mpeg"):
    return client.post(
        "/audio/upload",
        files={"arquivo": (filename, io.BytesIO(SAMPLE_AUDIO), mime)},
        data={"usuarioId": str(user_id)},
    )


class TestAudioUpload:
    """Tests for POST /audio/upload and /audio/upload-base64."""

    def test_upload_file(self, client: TestClient, test_user: dict):
        response = _upload(client, test_user["user_id"])
        assert response.status_code == 201
        data = response.json()
        assert data["usuarioId"] == test_user["user_id"]
        assert data["nomeArquivoOriginal"] == "voz.mp3"
        assert data["tamanhoArquivo"] == len(SAMPLE_AUDIO)
        assert data["tipoMime"] == "audio/mpeg"
        assert data["statusTranscricao"] == "uploaded"
        assert 0 <= data["duracaoSegundos"] <= 15

    def test_upload_keeps_extension_in_storage(self, client: TestClient, test_user: dict, db_session: Session):
        audio_id = _upload(client, test_user["user_id"], "clip.wav", "audio/wav").json()["id"]
        assert db_session.get(AudioRecord, audio_id).storage_ref.endswith(".wav")

    def test_upload_rejects_unsupported_type(self, client: TestClient, test_user: dict):
        response = _upload(client, test_user["user_id"], "clip.ogg", "audio/ogg")
        assert response.status_code == 400
        assert "Unsupported audio format" in response.json()["detail"]

    def test_upload_over_configured_limit(self, client: TestClient, test_user: dict):
        with patch.object(get_settings(), "MAX_UPLOAD_SIZE_MB", 1):
            response = client.post(
                "/audio/upload",
                files={"arquivo": ("big.webm", io.BytesIO(b"\x00" * (1024 * 1024 + 10)), "audio/webm")},
                data={"usuarioId": str(test_user["user_id"])},
            )
        assert response.status_code == 400
        assert "too large" in response.json()["detail"]

    def test_upload_unknown_user(self, client: TestClient):
        assert _upload(client, 999).status_code == 404

    def test_upload_base64(self, client: TestClient, test_user: dict):
        response = client.post(
            "/audio/upload-base64",
            data={"usuarioId": str(test_user["user_id"]), "audioDataUri": SAMPLE_DATA_URI, "nomeArquivo": "a.webm"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["tipoMime"] == "audio/webm"
        assert data["nomeArquivoOriginal"] == "a.webm"

    def test_upload_base64_invalid(self, client: TestClient, test_user: dict):
        response = client.post(
            "/audio/upload-base64",
            data={"usuarioId": str(test_user["user_id"]), "audioDataUri": "data:audio/webm;base64,@@@"},
        )
        assert response.status_code == 400
        assert "audioDataUri" in response.json()["fields"]


class TestAudioRead:
    """Tests for audio lookups and deletion."""

    def test_get_audio(self, client: TestClient, test_user: dict):
        audio_id = _upload(client, test_user["user_id"]).json()["id"]
        response = client.get(f"/audio/{audio_id}")
        assert response.status_code == 200
        assert response.json()["id"] == audio_id

    def test_get_missing_audio(self, client: TestClient):
        assert client.get("/audio/999").status_code == 404

    def test_list_user_audio(self, client: TestClient, test_user: dict, other_user: dict):
        first = _upload(client, test_user["user_id"]).json()["id"]
        second = _upload(client, test_user["user_id"]).json()["id"]
        _upload(client, other_user["user_id"])

        data = client.get(f"/audio/usuario/{test_user['user_id']}").json()
        assert [a["id"] for a in data] == [second, first]

    def test_delete_audio(self, client: TestClient, test_user: dict, db_session: Session, audio_store):
        audio_id = _upload(client, test_user["user_id"]).json()["id"]
        storage_ref = db_session.get(AudioRecord, audio_id).storage_ref

        assert client.delete(f"/audio/{audio_id}").status_code == 204
        assert client.get(f"/audio/{audio_id}").status_code == 404
        assert not (audio_store.base_dir / storage_ref).exists()

    def test_delete_audio_removes_its_post(self, client: TestClient, test_user: dict, db_session: Session):
        post = client.post(
            "/posts/com-arquivo",
            files={"arquivo": ("g.webm", io.BytesIO(SAMPLE_AUDIO), "audio/webm")},
            data={"usuarioId": str(test_user["user_id"])},
        ).json()

        assert client.delete(f"/audio/{post['arquivoAudio']['id']}").status_code == 204
        assert db_session.query(Post).count() == 0
        assert client.get(f"/posts/{post['id']}").status_code == 404

    def test_delete_missing_audio(self, client: TestClient):
        assert client.delete("/audio/999").status_code == 404


class TestTranscribeEndpoint:
    """Tests for POST /audio/transcrever."""

    @patch(TRANSCRIBE, return_value="Ola mundo")
    def test_success(self, mock_transcribe, client: TestClient):
        response = client.post("/audio/transcrever", json={"audioDataUri": SAMPLE_DATA_URI})
        assert response.status_code == 200
        assert response.json() == {"transcricao": "Ola mundo", "sucesso": True, "mensagem": "Transcription completed"}
        args, kwargs = mock_transcribe.call_args
        assert kwargs["mime_type"] == "audio/webm"

    @patch(TRANSCRIBE)
    def test_provider_failure(self, mock_transcribe, client: TestClient):
        mock_transcribe.side_effect = ExternalServiceError(
            ExternalServiceKind.UPSTREAM_ERROR, "Transcription service returned HTTP 500", 500
        )
        response = client.post("/audio/transcrever", json={"audioDataUri": SAMPLE_DATA_URI})
        assert response.status_code == 502
        assert response.json() == {
            "sucesso": False,
            "mensagem": "Transcription service returned HTTP 500",
            "erro": "UPSTREAM_ERROR",
        }

    @patch(TRANSCRIBE)
    def test_provider_timeout(self, mock_transcribe, client: TestClient):
        mock_transcribe.side_effect = ExternalServiceError(ExternalServiceKind.TIMEOUT, "timed out")
        response = client.post("/audio/transcrever", json={"audioDataUri": SAMPLE_DATA_URI})
        assert response.status_code == 504

    def test_missing_api_key(self, client: TestClient, monkeypatch):
        monkeypatch.setattr(transcription_client_module, "_transcription_client", TranscriptionClient(api_key=""))
        response = client.post("/audio/transcrever", json={"audioDataUri": SAMPLE_DATA_URI})
        assert response.status_code == 502
        assert response.json()["erro"] == "UNAUTHORIZED"

    def test_invalid_data_uri(self, client: TestClient):
        response = client.post("/audio/transcrever", json={"audioDataUri": "hello"})
        assert response.status_code == 400


class TestVoiceTransformEndpoint:
    """Tests for POST /audio/transformar-voz."""

    @patch(TRANSCRIBE, return_value="Ola")
    def test_natural_returns_same_audio(self, mock_transcribe, client: TestClient):
        response = client.post(
            "/audio/transformar-voz", json={"audioDataUri": SAMPLE_DATA_URI, "tipoFiltro": "NATURAL"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["audioTransformadoDataUri"] == SAMPLE_DATA_URI
        assert data["transcricao"] == "Ola"
        assert data["transformacaoDisponivel"] is True

    @patch(TRANSCRIBE, return_value="never used")
    def test_given_transcript_skips_transcription(self, mock_transcribe, client: TestClient):
        response = client.post(
            "/audio/transformar-voz",
            json={"audioDataUri": SAMPLE_DATA_URI, "tipoFiltro": "NATURAL", "transcricao": "Ja transcrito"},
        )
        assert response.json()["transcricao"] == "Ja transcrito"
        mock_transcribe.assert_not_called()

    @patch(TRANSCRIBE, return_value="bip")
    def test_robotic_is_flagged_unavailable(self, mock_transcribe, client: TestClient):
        response = client.post(
            "/audio/transformar-voz", json={"audioDataUri": SAMPLE_DATA_URI, "tipoFiltro": "ROBOTICO"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["transformacaoDisponivel"] is False
        assert data["audioTransformadoDataUri"] == SAMPLE_DATA_URI
        assert "unavailable" in data["mensagem"]

    def test_unknown_filter(self, client: TestClient):
        response = client.post("/audio/transformar-voz", json={"audioDataUri": SAMPLE_DATA_URI, "tipoFiltro": "ECO"})
        assert response.status_code == 400
        assert "tipoFiltro" in response.json()["fields"]

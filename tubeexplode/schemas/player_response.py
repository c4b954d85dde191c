from pydantic import BaseModel
from typing import Optional, List


class PlayabilityStatus(BaseModel):
    status: Optional[str] = None
    reason: Optional[str] = None
    playableInEmbed: Optional[bool] = None

    @property
    def is_playable(self) -> bool:
        return self.status == "OK"


class StreamFormat(BaseModel):
    itag: Optional[int] = None
    url: Optional[str] = None
    mimeType: Optional[str] = None
    bitrate: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    contentLength: Optional[str] = None
    qualityLabel: Optional[str] = None
    fps: Optional[int] = None
    audioQuality: Optional[str] = None
    # Ciphered streams carry one of these instead of url
    signatureCipher: Optional[str] = None
    cipher: Optional[str] = None

    @property
    def requires_decryption(self) -> bool:
        return self.url is None and (self.signatureCipher is not None or self.cipher is not None)

    @property
    def cipher_data(self) -> Optional[str]:
        return self.signatureCipher or self.cipher


class StreamingData(BaseModel):
    formats: Optional[List[StreamFormat]] = None
    adaptiveFormats: Optional[List[StreamFormat]] = None
    dashManifestUrl: Optional[str] = None
    hlsManifestUrl: Optional[str] = None

    @property
    def all_formats(self) -> List[StreamFormat]:
        return (self.formats or []) + (self.adaptiveFormats or [])


class PlayerResponse(BaseModel):
    playabilityStatus: Optional[PlayabilityStatus] = None
    streamingData: Optional[StreamingData] = None

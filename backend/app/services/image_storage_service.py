# backend/app/services/image_storage_service.py
"""
Alojamiento de imágenes de producto y banners en Google Drive.

Cada imagen se sube a una carpeta compartida y se publica con permiso de
lectura para cualquiera, de modo que la tienda pueda enlazarla directamente.
Sin credenciales el servicio queda deshabilitado y las subidas fallan con
ImageUploadError.
"""

import io
import logging
import os
import re
from typing import Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

from app.core.config import settings
from app.core.exceptions import ImageUploadError

logger = logging.getLogger(__name__)

# --- Configuración de la API de Google Drive ---
SCOPES = ['https://www.googleapis.com/auth/drive']
PUBLIC_URL_TEMPLATE = "https://drive.google.com/uc?export=view&id={file_id}"
_FILE_ID_PATTERN = re.compile(r"(?:[?&]id=|/d/)([\w-]+)")


def allowed_image(filename: Optional[str]) -> bool:
    """Comprueba la extensión del fichero contra ALLOWED_IMAGE_EXTENSIONS."""
    if not filename or "." not in filename:
        return False
    extension = filename.rsplit(".", 1)[1].lower()
    return extension in {ext.lower() for ext in settings.ALLOWED_IMAGE_EXTENSIONS}


def extract_file_id(url: str) -> Optional[str]:
    match = _FILE_ID_PATTERN.search(url or "")
    return match.group(1) if match else None


class ImageStorageService:
    def __init__(self, credentials_file: Optional[str] = None, folder_name: Optional[str] = None):
        self.credentials_file = credentials_file or os.path.join(settings.BASE_DIR, settings.GOOGLE_CREDENTIALS_FILE)
        self.folder_name = folder_name or settings.GOOGLE_DRIVE_IMAGES_FOLDER
        self.creds = None
        self.service = None
        self._folder_id: Optional[str] = None
        if os.path.exists(self.credentials_file):
            try:
                self.creds = service_account.Credentials.from_service_account_file(
                    self.credentials_file, scopes=SCOPES
                )
                self.service = build('drive', 'v3', credentials=self.creds)
                logger.info("Servicio de imágenes (Google Drive) inicializado correctamente.")
            except Exception as e:
                logger.error(f"No se pudo inicializar el servicio de Google Drive: {e}", exc_info=True)
        else:
            logger.warning("No se encontró el archivo de credenciales de Google. La subida de imágenes no estará disponible.")

    @property
    def available(self) -> bool:
        return self.service is not None

    def _find_folder_id(self) -> Optional[str]:
        """Busca (una sola vez) el ID de la carpeta de imágenes."""
        if self._folder_id or not self.service:
            return self._folder_id

        query = f"mimeType='application/vnd.google-apps.folder' and name='{self.folder_name}' and trashed=false"
        response = self.service.files().list(
            q=query,
            spaces='drive',
            fields='files(id, name)',
            supportsAllDrives=True,
            includeItemsFromAllDrives=True
        ).execute()
        files = response.get('files', [])

        if files:
            self._folder_id = files[0].get('id')
            logger.info(f"Carpeta '{self.folder_name}' encontrada con ID: {self._folder_id}")
        else:
            logger.warning(f"No se encontró la carpeta con el nombre: {self.folder_name}")
        return self._folder_id

    def upload_image(self, content: bytes, filename: str, mimetype: str) -> str:
        """Sube la imagen y devuelve su URL pública estable."""
        if not self.service:
            raise ImageUploadError("Image storage is not configured")

        try:
            folder_id = self._find_folder_id()
            file_metadata = {'name': filename}
            if folder_id:
                file_metadata['parents'] = [folder_id]

            media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mimetype or 'application/octet-stream', resumable=True)
            file = self.service.files().create(
                body=file_metadata,
                media_body=media,
                fields='id',
                supportsAllDrives=True,
            ).execute()
            file_id = file.get('id')

            self.service.permissions().create(
                fileId=file_id,
                body={'type': 'anyone', 'role': 'reader'},
                supportsAllDrives=True,
            ).execute()
        except Exception as e:
            logger.error(f"❌ IMAGEN: Error al subir '{filename}' a Google Drive: {e}", exc_info=True)
            raise ImageUploadError(f"Could not upload image '{filename}'") from e

        url = PUBLIC_URL_TEMPLATE.format(file_id=file_id)
        logger.info(f"✅ IMAGEN: '{filename}' subida con ID {file_id}")
        return url

    def delete_image(self, url: str) -> bool:
        """Borrado best-effort: un fallo se registra y no se propaga."""
        file_id = extract_file_id(url)
        if not self.service or not file_id:
            return False
        try:
            self.service.files().delete(fileId=file_id, supportsAllDrives=True).execute()
            logger.info(f"🗑️ IMAGEN: Eliminada imagen {file_id}")
            return True
        except Exception as e:
            logger.warning(f"⚠️ IMAGEN: No se pudo eliminar la imagen {file_id}: {e}")
            return False

# Instancia única del servicio para ser usada en la aplicación
image_storage_service = ImageStorageService()

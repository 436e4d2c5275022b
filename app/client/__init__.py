from app.client.api import MenuApiClient
from app.client.form import MenuForm

__all__ = ["MenuApiClient", "MenuForm"]

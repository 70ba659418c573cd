"""Manga Portal: API каталога манги, оценок и избранного со страницей манги на сервере."""

__version__ = "1.0.0"

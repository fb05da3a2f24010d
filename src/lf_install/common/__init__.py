"""Helpers shared by the release client and downloader."""

"""
Persistence service for the Sideline match clock.

This module backs the match store with a JSON file. The whole snapshot is
written to a temporary file and moved into place before the in-memory tables
are swapped, so a failed write leaves both the file and memory unchanged.
"""
import json
import logging
import os
import tempfile
from typing import Any, Dict

from ..models import Match, MatchPlayer, MatchEvent
from .errors import StoreError
from .match_store import InMemoryMatchStore, StoreTables

log = logging.getLogger(__name__)


class PersistenceService:
    """
    Serialization of store tables to and from JSON documents.
    """

    @staticmethod
    def tables_to_json(tables: StoreTables) -> Dict[str, Any]:
        return {
            "matches": [m.to_json() for m in tables.matches.values()],
            "match_players": [mp.to_json() for mp in tables.match_players.values()],
            "events": [ev.to_json() for ev in tables.events.values()],
        }

    @staticmethod
    def tables_from_json(data: Dict[str, Any]) -> StoreTables:
        tables = StoreTables()
        for raw in data.get("matches", []):
            match = Match.from_json(raw)
            tables.matches[match.id] = match
        for raw in data.get("match_players", []):
            row = MatchPlayer.from_json(raw)
            tables.match_players[row.id] = row
        for raw in data.get("events", []):
            event = MatchEvent.from_json(raw)
            tables.events[event.id] = event
        return tables

    @staticmethod
    def save_to_file(tables: StoreTables, file_path: str) -> None:
        """
        Save store tables to a JSON file atomically.

        Args:
            tables: The tables to save
            file_path: Path where to save the file

        Raises:
            StoreError: If the file cannot be written
        """
        snapshot = PersistenceService.tables_to_json(tables)

        directory = os.path.dirname(os.path.abspath(file_path))
        try:
            if not os.path.exists(directory):
                os.makedirs(directory)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(snapshot, f, indent=2)
                os.replace(tmp_path, file_path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as exc:
            log.error("Failed to write match store %s: %s", file_path, exc)
            raise StoreError(f"Could not save match data: {exc}") from exc

    @staticmethod
    def load_from_file(file_path: str) -> StoreTables:
        """
        Load store tables from a JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file contains invalid JSON
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Match data file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return PersistenceService.tables_from_json(data)


class JsonFileMatchStore(InMemoryMatchStore):
    """Match store that writes every committed transaction to a JSON file."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        tables = None
        if os.path.exists(file_path):
            tables = PersistenceService.load_from_file(file_path)
            log.info("Loaded %d matches from %s", len(tables.matches), file_path)
        super().__init__(tables)

    def _persist(self, tables: StoreTables) -> None:
        PersistenceService.save_to_file(tables, self.file_path)

"""To-do list persisted as a JSON file."""

from __future__ import annotations

import json
import uuid
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError as PydanticValidationError

from urfocus_cli.models import TodoItem
from urfocus_cli.models.exceptions import NotFoundError, ValidationError
from urfocus_cli.utils.logger import get_logger

logger = get_logger()


class TodoService:
    """Manages the to-do list file."""

    def __init__(self, todo_file: Path | None = None):
        if todo_file is None:
            todo_file = Path(user_data_dir("urfocus_cli")) / "todos.json"

        self.todo_file = todo_file
        self.todo_file.parent.mkdir(parents=True, exist_ok=True)

    def list(self) -> list[TodoItem]:
        """Load all items. A missing or corrupt file reads as empty."""
        if not self.todo_file.exists():
            return []
        try:
            with open(self.todo_file, encoding="utf-8") as f:
                data = json.load(f)
            return [TodoItem.model_validate(item) for item in data]
        except (json.JSONDecodeError, TypeError, PydanticValidationError) as e:
            logger.warning("ignoring unreadable todo file %s: %s", self.todo_file, e)
            return []

    def _save(self, items: list[TodoItem]) -> None:
        with open(self.todo_file, "w", encoding="utf-8") as f:
            json.dump([item.model_dump() for item in items], f, indent=2)
        self.todo_file.chmod(0o600)

    def _find(self, items: list[TodoItem], item_id: str) -> TodoItem:
        """Match by full id or unique id prefix."""
        if not item_id:
            raise NotFoundError("To-do id is required")
        matches = [item for item in items if item.id.startswith(item_id)]
        exact = [item for item in matches if item.id == item_id]
        if exact:
            return exact[0]
        if len(matches) > 1:
            raise ValidationError(f"Ambiguous to-do id '{item_id}'")
        if not matches:
            raise NotFoundError(f"To-do '{item_id}' not found")
        return matches[0]

    def add(self, title: str) -> TodoItem | None:
        """Append an item; blank titles are ignored and return None."""
        title = title.strip()
        if not title:
            return None
        items = self.list()
        item = TodoItem(id=uuid.uuid4().hex, title=title)
        items.append(item)
        self._save(items)
        return item

    def toggle(self, item_id: str) -> TodoItem:
        items = self.list()
        item = self._find(items, item_id)
        item.is_completed = not item.is_completed
        self._save(items)
        return item

    def delete(self, item_id: str) -> TodoItem:
        items = self.list()
        item = self._find(items, item_id)
        self._save([other for other in items if other.id != item.id])
        return item

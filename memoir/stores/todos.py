"""To-do list store. New items go to the front."""

from typing import Any, Optional

from memoir.models.journal import TodoItem, TodoPriority
from memoir.models.storage import TODOS_KEY
from memoir.stores.base import ModelListStore
from memoir.stores.errors import EntryNotFoundError


class TodoStore(ModelListStore[TodoItem]):

    default_key = TODOS_KEY
    model = TodoItem

    async def add(
        self,
        title: str,
        description: str = "",
        priority: TodoPriority = TodoPriority.MEDIUM,
        due_date: Optional[str] = None,
    ) -> TodoItem:
        todo = TodoItem(
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
        )
        todos = await self.load()
        await self.save([todo, *todos])
        return todo

    async def update(self, todo_id: str, **changes: Any) -> TodoItem:
        todos = await self.load()
        idx = self._index_of(todos, todo_id)
        if idx is None:
            raise EntryNotFoundError("Todo", todo_id)
        todos[idx] = todos[idx].model_copy(update=changes)
        todos[idx] = TodoItem.model_validate(todos[idx].to_json())
        await self.save(todos)
        return todos[idx]

    async def toggle_complete(self, todo_id: str) -> TodoItem:
        todos = await self.load()
        idx = self._index_of(todos, todo_id)
        if idx is None:
            raise EntryNotFoundError("Todo", todo_id)
        return await self.update(todo_id, completed=not todos[idx].completed)

    async def delete(self, todo_id: str) -> bool:
        todos = await self.load()
        remaining = [t for t in todos if t.id != todo_id]
        if len(remaining) == len(todos):
            return False
        await self.save(remaining)
        return True

    async def pending(self) -> list[TodoItem]:
        return [t for t in await self.load() if not t.completed]

    async def completed(self) -> list[TodoItem]:
        return [t for t in await self.load() if t.completed]

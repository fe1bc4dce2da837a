"""Resource facades for the mite API.

Each resource declares the operations it supports by mixing in capability
classes: ``Listable``/``ActiveArchived`` for listings, ``Findable`` for single
lookups and ``Creatable``/``Updatable``/``Destroyable`` for mutations.
Read-only resources simply leave the mutation mixins out.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

from .gateway import Params, RequestGateway
from .models import OptionsLike

# http://mite.yo.lk/en/api/


def resource_name(path: str) -> str:
    """Singular payload key for a plural resource path (time_entries -> time_entry)."""
    return re.sub(r"ie$", "y", re.sub(r"s$", "", path))


class Resource:
    path: str = ""

    def __init__(self, gateway: RequestGateway) -> None:
        self._gateway = gateway

    @property
    def name(self) -> str:
        return resource_name(self.path)

    def _wrap(self, params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        return {self.name: params}

    def _member(self, resource_id: Any) -> str:
        return f"{self.path}/{resource_id}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, cached={self._gateway.use_cache})"


class Listable(Resource):
    def all(self, params: Params = None, options: OptionsLike = None) -> Any:
        return self._gateway.get(self.path, params, options)


class ActiveArchived(Resource):
    def active(self, params: Params = None, options: OptionsLike = None) -> Any:
        return self._gateway.get(self.path, params, options)

    def archived(self, params: Params = None, options: OptionsLike = None) -> Any:
        return self._gateway.get(f"{self.path}/archived", params, options)


class Findable(Resource):
    def find(self, resource_id: Any, options: OptionsLike = None) -> Any:
        return self._gateway.get(self._member(resource_id), None, options)


class Creatable(Resource):
    def create(self, params: Optional[Mapping[str, Any]], options: OptionsLike = None) -> Any:
        return self._gateway.post(self.path, self._wrap(params), options)


class Updatable(Resource):
    def update(self, resource_id: Any, params: Optional[Mapping[str, Any]], options: OptionsLike = None) -> Any:
        return self._gateway.put(self._member(resource_id), self._wrap(params), options)


class Destroyable(Resource):
    def destroy(self, resource_id: Any, options: OptionsLike = None) -> Any:
        return self._gateway.destroy(self._member(resource_id), options)


class HasTimeEntries(Resource):
    """Resources whose id can filter the time entry listing."""

    relation_key: str = ""

    def time_entries_for(self, ids: Any, options: OptionsLike = None) -> Any:
        return self._gateway.get("time_entries", {self.relation_key: ids}, options)


class TimeEntries(Listable, Findable, Creatable, Updatable, Destroyable):
    path = "time_entries"


class Bookmarks(Listable, Findable):
    path = "time_entries/bookmarks"

    def time_entries_for(self, resource_id: Any, options: OptionsLike = None) -> Any:
        return self._gateway.get(f"{self._member(resource_id)}/follow", None, options)


class Customers(ActiveArchived, Findable, Creatable, Updatable, Destroyable, HasTimeEntries):
    path = "customers"
    relation_key = "customer_id"

    def projects_for(self, ids: Any, options: OptionsLike = None) -> Any:
        return self._gateway.get("projects", {self.relation_key: ids}, options)


class Projects(ActiveArchived, Findable, Creatable, Updatable, Destroyable, HasTimeEntries):
    path = "projects"
    relation_key = "project_id"


class Services(ActiveArchived, Findable, Creatable, Updatable, Destroyable, HasTimeEntries):
    path = "services"
    relation_key = "service_id"


class Users(ActiveArchived, Findable, HasTimeEntries):
    path = "users"
    relation_key = "user_id"


class Tracker(Resource):
    path = "tracker"

    def find(self, options: OptionsLike = None) -> Any:
        return self._gateway.get(self.path, None, options)

    def start(self, resource_id: Any, options: OptionsLike = None) -> Any:
        return self._gateway.put(self._member(resource_id), {}, options)

    def stop(self, resource_id: Any, options: OptionsLike = None) -> Any:
        return self._gateway.destroy(self._member(resource_id), options)


__all__ = [
    "ActiveArchived",
    "Bookmarks",
    "Creatable",
    "Customers",
    "Destroyable",
    "Findable",
    "HasTimeEntries",
    "Listable",
    "Projects",
    "Resource",
    "Services",
    "TimeEntries",
    "Tracker",
    "Updatable",
    "Users",
    "resource_name",
]

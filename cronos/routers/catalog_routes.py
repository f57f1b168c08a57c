# cronos/routers/catalog_routes.py

from typing import List, Type

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from cronos.auth import get_current_user
from cronos.deps import get_repos, require_admin
from cronos.repositories import Repositories
from cronos.schemas import Client, CustomField, Event, Provider, Service, Transaction


def crud_router(prefix: str, model: Type[BaseModel], attr: str, public_read: bool = False) -> APIRouter:
    """
    List/get/create/update/delete routes for one flat collection.

    Writes are admin only. With `public_read` any logged-in user may read
    (the booking form needs services and providers).
    """
    router = APIRouter(prefix=prefix, tags=[attr])

    def repo_of(repos: Repositories):
        return getattr(repos, attr)

    @router.get("", response_model=List[model])
    def list_items(
        active_only: bool = False,
        repos: Repositories = Depends(get_repos),
        current_user: dict = Depends(get_current_user),
    ):
        if not public_read:
            require_admin(current_user)
        items = repo_of(repos).list()
        if active_only:
            items = [i for i in items if getattr(i, "active", True)]
        return items

    @router.get("/{item_id}", response_model=model)
    def get_item(
        item_id: str,
        repos: Repositories = Depends(get_repos),
        current_user: dict = Depends(get_current_user),
    ):
        if not public_read:
            require_admin(current_user)
        return repo_of(repos).get(item_id)

    @router.post("", response_model=model, status_code=201)
    def create_item(
        item: model,
        repos: Repositories = Depends(get_repos),
        current_user: dict = Depends(get_current_user),
    ):
        require_admin(current_user)
        if repo_of(repos).find(item.id) is not None:
            raise HTTPException(status_code=409, detail=f"{model.__name__} '{item.id}' already exists")
        return repo_of(repos).save(item)

    @router.put("/{item_id}", response_model=model)
    def update_item(
        item_id: str,
        item: model,
        repos: Repositories = Depends(get_repos),
        current_user: dict = Depends(get_current_user),
    ):
        require_admin(current_user)
        item.id = item_id
        return repo_of(repos).save(item)

    @router.delete("/{item_id}", status_code=204)
    def delete_item(
        item_id: str,
        repos: Repositories = Depends(get_repos),
        current_user: dict = Depends(get_current_user),
    ):
        require_admin(current_user)
        repo_of(repos).delete(item_id)
        return Response(status_code=204)

    return router


clients_router = crud_router("/clients", Client, "clients")
services_router = crud_router("/services", Service, "services", public_read=True)
providers_router = crud_router("/providers", Provider, "providers", public_read=True)
events_router = crud_router("/events", Event, "events")
transactions_router = crud_router("/transactions", Transaction, "transactions")


@events_router.post("/{event_id}/attendees/{client_id}", response_model=Event)
def toggle_attendee(
    event_id: str,
    client_id: str,
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    with repos.lock:
        event = repos.events.get(event_id)
        if client_id in event.attendees:
            event.attendees = [a for a in event.attendees if a != client_id]
        else:
            if event.capacity and len(event.attendees) >= event.capacity:
                raise HTTPException(status_code=409, detail="Event is full")
            event.attendees = event.attendees + [client_id]
        repos.events.save(event)
    return event


form_router = APIRouter(prefix="/form-config", tags=["form_config"])


@form_router.get("", response_model=List[CustomField])
def get_form_config(
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    # the booking form renders these fields for every role
    return repos.form_config.get_fields()


@form_router.put("", response_model=List[CustomField])
def save_form_config(
    fields: List[CustomField],
    repos: Repositories = Depends(get_repos),
    current_user: dict = Depends(get_current_user),
):
    require_admin(current_user)
    return repos.form_config.save_fields(fields)

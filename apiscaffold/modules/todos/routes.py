"""
API Scaffold — Todo Routes
===========================

What:  CRUD over todos, mounted at /api/v1/todos.

    GET    /        list, filtered by ?completed= and ?userId=
    POST   /        create
    GET    /{id}    read
    PUT    /{id}    partial update
    DELETE /{id}    delete (204, empty body)

Handlers work on the Store injected for this module (ctx.store()).
"""

from starlette.responses import Response

from apiscaffold.core.routes import RequestContext, Route, RouteSchema
from apiscaffold.exceptions import NotFoundError
from apiscaffold.modules.todos.schemas import (
    CreateTodo,
    Todo,
    TodoList,
    TodoParams,
    TodoQuery,
    UpdateTodo,
)


async def list_todos(ctx: RequestContext):
    return await ctx.store().list(
        completed=ctx.query.completed,
        user_id=ctx.query.user_id,
    )


async def create_todo(ctx: RequestContext):
    return await ctx.store().create(ctx.body.model_dump())


async def get_todo(ctx: RequestContext):
    todo = await ctx.store().get(ctx.params.id)
    if todo is None:
        raise NotFoundError("Todo not found", resource_id=str(ctx.params.id))
    return todo


async def update_todo(ctx: RequestContext):
    # exclude_unset: fields the client did not send keep their value
    todo = await ctx.store().update(ctx.params.id, ctx.body.model_dump(exclude_unset=True))
    if todo is None:
        raise NotFoundError("Todo not found", resource_id=str(ctx.params.id))
    return todo


async def delete_todo(ctx: RequestContext):
    if not await ctx.store().delete(ctx.params.id):
        raise NotFoundError("Todo not found", resource_id=str(ctx.params.id))
    return Response(status_code=204)


routes = [
    Route(
        method="GET",
        path="/",
        handler=list_todos,
        schema=RouteSchema(query=TodoQuery, response=TodoList),
        summary="List todos",
        description="Get a list of todos with optional filters",
        tags=("Todos",),
    ),
    Route(
        method="POST",
        path="/",
        handler=create_todo,
        schema=RouteSchema(body=CreateTodo, response=Todo),
        summary="Create todo",
        description="Create a new todo",
        tags=("Todos",),
    ),
    Route(
        method="GET",
        path="/{id}",
        handler=get_todo,
        schema=RouteSchema(params=TodoParams, response=Todo),
        summary="Get todo",
        description="Get a todo by ID",
        tags=("Todos",),
    ),
    Route(
        method="PUT",
        path="/{id}",
        handler=update_todo,
        schema=RouteSchema(params=TodoParams, body=UpdateTodo, response=Todo),
        summary="Update todo",
        description="Update an existing todo",
        tags=("Todos",),
    ),
    Route(
        method="DELETE",
        path="/{id}",
        handler=delete_todo,
        schema=RouteSchema(params=TodoParams),
        summary="Delete todo",
        description="Delete an existing todo",
        tags=("Todos",),
    ),
]

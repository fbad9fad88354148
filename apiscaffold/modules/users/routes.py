"""
API Scaffold — User Routes
===========================

What:  CRUD over users, mounted at /api/v1/users.

    GET    /        list
    POST   /        create
    GET    /{id}    read
    PUT    /{id}    partial update
    DELETE /{id}    delete (204); declared without a schema, so it is
                    served but left out of the API document

Passwords are validated on input and then dropped: authentication is out of
scope, and nothing downstream reads them.
"""

from starlette.responses import Response

from apiscaffold.core.routes import RequestContext, Route, RouteSchema
from apiscaffold.exceptions import NotFoundError
from apiscaffold.modules.users.schemas import (
    CreateUser,
    UpdateUser,
    User,
    UserList,
    UserParams,
)

USER_NOT_FOUND = "User not found"


async def list_users(ctx: RequestContext):
    return await ctx.store().list()


async def create_user(ctx: RequestContext):
    return await ctx.store().create(ctx.body.model_dump(exclude={"password"}))


async def get_user(ctx: RequestContext):
    user = await ctx.store().get(ctx.params.id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND, resource_id=str(ctx.params.id))
    return user


async def update_user(ctx: RequestContext):
    changes = ctx.body.model_dump(exclude_unset=True, exclude={"password"})
    user = await ctx.store().update(ctx.params.id, changes)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND, resource_id=str(ctx.params.id))
    return user


async def delete_user(ctx: RequestContext):
    # No params schema on this route: ctx.params is the raw path dict
    user_id = ctx.params["id"]
    if not await ctx.store().delete(user_id):
        raise NotFoundError(USER_NOT_FOUND, resource_id=user_id)
    return Response(status_code=204)


routes = [
    Route(
        method="GET",
        path="/",
        handler=list_users,
        schema=RouteSchema(response=UserList),
        summary="List all users",
        description="Retrieve a list of all users",
    ),
    Route(
        method="POST",
        path="/",
        handler=create_user,
        schema=RouteSchema(body=CreateUser, response=User),
        summary="Create a new user",
        description="Create a new user with the provided data",
    ),
    Route(
        method="GET",
        path="/{id}",
        handler=get_user,
        schema=RouteSchema(params=UserParams, response=User),
        summary="Get a user by ID",
        description="Retrieve a specific user by their ID",
    ),
    Route(
        method="PUT",
        path="/{id}",
        handler=update_user,
        schema=RouteSchema(params=UserParams, body=UpdateUser, response=User),
        summary="Update a user",
        description="Update an existing user with the provided data",
    ),
    Route(
        method="DELETE",
        path="/{id}",
        handler=delete_user,
        summary="Delete a user",
        description="Delete an existing user",
    ),
]

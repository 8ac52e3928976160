from dto.base import Dto, DtoAttribute


class UserDto(Dto):
    """Read-only view of a user handed out by UserPublicApi."""

    id = DtoAttribute()
    email = DtoAttribute()
    first_name = DtoAttribute()
    last_name = DtoAttribute()
    account_id = DtoAttribute()
    role = DtoAttribute()
    created_at = DtoAttribute()
    updated_at = DtoAttribute()

    # Computed on the model
    full_name = DtoAttribute()
    administrator = DtoAttribute("administrator?")
    regular_user = DtoAttribute("regular_user?")

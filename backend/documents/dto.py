from dto.base import Dto, DtoAttribute


class AccountDto(Dto):
    id = DtoAttribute()
    name = DtoAttribute()
    created_at = DtoAttribute()
    updated_at = DtoAttribute()


class DocumentDto(Dto):
    id = DtoAttribute()
    title = DtoAttribute()
    content = DtoAttribute()
    user_id = DtoAttribute()
    status = DtoAttribute()
    storage_bytes = DtoAttribute()
    created_at = DtoAttribute()
    updated_at = DtoAttribute()

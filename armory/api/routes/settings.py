"""Reference data endpoints: assets and bases."""

from fastapi import APIRouter, Depends, status

from armory.api.dependencies import (
    get_actor,
    get_manage_assets_use_case,
    get_manage_bases_use_case,
)
from armory.application.dto.requests import AssetRequest, BaseRequest
from armory.application.dto.responses import (
    AssetListResponse,
    AssetResponse,
    BaseListResponse,
    BaseResponse,
    DeleteResponse,
    ErrorResponse,
)
from armory.application.use_cases import ManageAssetsUseCase, ManageBasesUseCase
from armory.core.entities.access import Actor

router = APIRouter(prefix="/api/settings", tags=["settings"])

_WRITE_ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# Assets


@router.get("/assets/get", response_model=AssetListResponse)
async def list_assets(
    use_case: ManageAssetsUseCase = Depends(get_manage_assets_use_case),
) -> AssetListResponse:
    """List the asset catalogue."""
    return use_case.to_list_response(await use_case.list_all())


@router.get(
    "/assets/get/{asset_id}",
    response_model=AssetResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_asset(
    asset_id: int,
    use_case: ManageAssetsUseCase = Depends(get_manage_assets_use_case),
) -> AssetResponse:
    return use_case.to_response(await use_case.get(asset_id))


@router.post(
    "/assets/create",
    response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_ERRORS,
)
async def create_asset(
    request: AssetRequest,
    actor: Actor = Depends(get_actor),
    use_case: ManageAssetsUseCase = Depends(get_manage_assets_use_case),
) -> AssetResponse:
    return use_case.to_response(await use_case.create(request, actor))


@router.put("/assets/update/{asset_id}", response_model=AssetResponse, responses=_WRITE_ERRORS)
async def update_asset(
    asset_id: int,
    request: AssetRequest,
    actor: Actor = Depends(get_actor),
    use_case: ManageAssetsUseCase = Depends(get_manage_assets_use_case),
) -> AssetResponse:
    return use_case.to_response(await use_case.update(asset_id, request, actor))


@router.delete(
    "/assets/delete/{asset_id}",
    response_model=DeleteResponse,
    responses={**_WRITE_ERRORS, 409: {"model": ErrorResponse}},
)
async def delete_asset(
    asset_id: int,
    actor: Actor = Depends(get_actor),
    use_case: ManageAssetsUseCase = Depends(get_manage_assets_use_case),
) -> DeleteResponse:
    """Delete an asset that no transaction references."""
    return DeleteResponse(id=asset_id, deleted=await use_case.delete(asset_id, actor))


# Bases


@router.get("/bases/get", response_model=BaseListResponse)
async def list_bases(
    use_case: ManageBasesUseCase = Depends(get_manage_bases_use_case),
) -> BaseListResponse:
    """List all bases."""
    return use_case.to_list_response(await use_case.list_all())


@router.get(
    "/bases/get/{base_id}",
    response_model=BaseResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_base(
    base_id: int,
    use_case: ManageBasesUseCase = Depends(get_manage_bases_use_case),
) -> BaseResponse:
    return use_case.to_response(await use_case.get(base_id))


@router.post(
    "/bases/create",
    response_model=BaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_WRITE_ERRORS,
)
async def create_base(
    request: BaseRequest,
    actor: Actor = Depends(get_actor),
    use_case: ManageBasesUseCase = Depends(get_manage_bases_use_case),
) -> BaseResponse:
    return use_case.to_response(await use_case.create(request, actor))


@router.put("/bases/update/{base_id}", response_model=BaseResponse, responses=_WRITE_ERRORS)
async def update_base(
    base_id: int,
    request: BaseRequest,
    actor: Actor = Depends(get_actor),
    use_case: ManageBasesUseCase = Depends(get_manage_bases_use_case),
) -> BaseResponse:
    return use_case.to_response(await use_case.update(base_id, request, actor))


@router.delete(
    "/bases/delete/{base_id}",
    response_model=DeleteResponse,
    responses={**_WRITE_ERRORS, 409: {"model": ErrorResponse}},
)
async def delete_base(
    base_id: int,
    actor: Actor = Depends(get_actor),
    use_case: ManageBasesUseCase = Depends(get_manage_bases_use_case),
) -> DeleteResponse:
    """Delete a base that no transaction references."""
    return DeleteResponse(id=base_id, deleted=await use_case.delete(base_id, actor))

"""
Endpoints de la integracion con Notion.

Todas las rutas requieren `Authorization: Bearer <token de Notion>`.
El poller corre en background; estas rutas solo lo inician, consultan o
detienen.
"""
from fastapi import APIRouter, Depends, status

from app.api.v1.dependencies.use_case_deps import (
    get_notion_token,
    get_notion_use_cases,
    get_poller_use_cases,
)
from app.application.dto.polling_dto import (
    DatabaseInfoDTO,
    PollerListDTO,
    PollerStatusDTO,
    WorkspaceUrlDTO,
)
from app.application.use_cases.notion_use_cases import NotionWorkspaceUseCases
from app.application.use_cases.polling_use_cases import FairnessPollerUseCases


router = APIRouter(prefix="/notion", tags=["Notion"])


@router.get(
    "/database",
    response_model=DatabaseInfoDTO,
    summary="Localizar la database CompX Fairness Indicator",
)
async def get_database(
    token: str = Depends(get_notion_token),
    use_cases: NotionWorkspaceUseCases = Depends(get_notion_use_cases),
) -> DatabaseInfoDTO:
    return await use_cases.get_database(token)


@router.get(
    "/workspace-url",
    response_model=WorkspaceUrlDTO,
    summary="URL navegable de la database",
)
async def get_workspace_url(
    token: str = Depends(get_notion_token),
    use_cases: NotionWorkspaceUseCases = Depends(get_notion_use_cases),
) -> WorkspaceUrlDTO:
    return await use_cases.get_workspace_url(token)


@router.post(
    "/polling",
    response_model=PollerStatusDTO,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Iniciar el poller para la credencial",
)
async def start_polling(
    token: str = Depends(get_notion_token),
    use_cases: FairnessPollerUseCases = Depends(get_poller_use_cases),
) -> PollerStatusDTO:
    """
    Inicia el poller en background y retorna inmediatamente.
    Si ya existe uno para el mismo token, retorna su estado.
    """
    return await use_cases.start_polling(token)


@router.get("/polling", response_model=PollerListDTO, summary="Listar los pollers de la credencial")
async def list_pollers(
    token: str = Depends(get_notion_token),
    use_cases: FairnessPollerUseCases = Depends(get_poller_use_cases),
) -> PollerListDTO:
    return await use_cases.list_pollers(token)


@router.get("/polling/{poller_id}", response_model=PollerStatusDTO, summary="Estado de un poller")
async def get_poller_status(
    poller_id: str,
    token: str = Depends(get_notion_token),
    use_cases: FairnessPollerUseCases = Depends(get_poller_use_cases),
) -> PollerStatusDTO:
    return await use_cases.get_status(token, poller_id)


@router.delete("/polling/{poller_id}", response_model=PollerStatusDTO, summary="Detener un poller")
async def stop_polling(
    poller_id: str,
    token: str = Depends(get_notion_token),
    use_cases: FairnessPollerUseCases = Depends(get_poller_use_cases),
) -> PollerStatusDTO:
    return await use_cases.stop_polling(token, poller_id)

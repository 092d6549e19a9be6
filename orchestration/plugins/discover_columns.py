import os
from dotenv import load_dotenv
from infrastructure.config import settings
from orchestration.flows.discover_columns_flow import discover_pipedrive_columns_flow

load_dotenv()

DOCKER_NETWORK_NAME = settings.DEFAULT_DOCKER_NETWORK_NAME
all_env_vars = dict(os.environ.items())

discover_pipedrive_columns_flow.deploy(
    name="Discover Pipedrive Columns",
    description="Lista as colunas e filtros disponíveis de uma entidade do Pipedrive.",
    tags=["pipedrive", "discovery"],
    work_pool_name=settings.PREFECT_WORK_POOL_NAME,
    image=settings.IMAGE_NAME,
    build=False,
    push=False,
    parameters={"entity_kind": "deals"},
    job_variables={
        "image_pull_policy": "Never",
        "networks": [DOCKER_NETWORK_NAME] if DOCKER_NETWORK_NAME else [],
        "auto_remove": True,
        "env": all_env_vars
    }
)

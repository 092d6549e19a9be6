import os
from dotenv import load_dotenv
from infrastructure.config import settings
from orchestration.flows.sync_entity_flow import sync_pipedrive_entity_flow

load_dotenv()

DOCKER_NETWORK_NAME = settings.DEFAULT_DOCKER_NETWORK_NAME
all_env_vars = dict(os.environ.items())

sync_pipedrive_entity_flow.deploy(
    name="Sync Pipedrive Entity",
    description="Sincroniza uma entidade do Pipedrive (colunas do sync_config.json) para a tabela de destino.",
    tags=["pipedrive", "sync", "entity"],
    work_pool_name=settings.PREFECT_WORK_POOL_NAME,
    image=settings.IMAGE_NAME,
    build=False,
    push=False,
    parameters={"config_path": settings.SYNC_CONFIG_PATH, "sink": settings.SYNC_SINK},
    job_variables={
        "image_pull_policy": "Never",
        "networks": [DOCKER_NETWORK_NAME] if DOCKER_NETWORK_NAME else [],
        "auto_remove": True,
        "env": all_env_vars
    }
)

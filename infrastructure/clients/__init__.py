from .pipedrive_api_client import PipedriveAPIClient

"""
Service identification attached to every log line.

`SERVICE_NAME` and `DEPLOY_ENV` come from the environment; the worker PID
(or `HOSTNAME` inside a container) tells replicas apart.
"""

from functools import lru_cache
import os


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'ticket-reservation')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    instance = os.getenv('HOSTNAME') or str(os.getpid())
    return f'{service_name}@{deploy_env}:{instance[:12]}'

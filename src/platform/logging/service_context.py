"""
Service context extraction for log lines.

Identifies which process emitted a line when several API workers and the
reaper-owning instance share one log stream.
"""

from functools import lru_cache
import os
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'mailer-booking')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hostnames are unique per replica, fall back to PID for local runs
    instance = os.getenv('HOSTNAME') or socket.gethostname() or ''
    if not instance or deploy_env == 'local_dev':
        instance = str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance[:12]}'

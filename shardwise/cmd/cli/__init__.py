"""
Sub functionalities of the shardwise CLI
"""

from .plan import plan, queues
from .config import config_app

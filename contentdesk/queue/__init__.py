"""AI generation queue: job submission and polled queue views."""

from contentdesk.queue.generation import GenerationQueueClient
from contentdesk.queue.monitor import QueueMonitor

__all__ = ["GenerationQueueClient", "QueueMonitor"]

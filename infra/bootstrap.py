"""
Pipeline initialization and bootstrap.

Singleton pattern for building the transport, publisher and batch
processor from configuration.
"""

from typing import Optional

from pipeline import BatchProcessor, EventPublisher
from services.publish import ChannelTransport

from .config import PipelineConfig, get_config


class PipelineBootstrap:
    """
    Bootstrap the pipeline based on configuration.

    Singleton pattern - single instance per process (one per warm lambda).
    """

    _instance: Optional["PipelineBootstrap"] = None

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        transport: Optional[ChannelTransport] = None,
    ):
        """Build the transport, publisher and processor once."""
        self.config = config or get_config()
        self.transport = transport or self.config.create_transport()
        self.publisher = EventPublisher(self.transport)
        self.processor = BatchProcessor.from_config(self.config, self.publisher)

    @classmethod
    def get_instance(
        cls,
        config: Optional[PipelineConfig] = None,
        transport: Optional[ChannelTransport] = None,
    ) -> "PipelineBootstrap":
        """
        Return the process-wide pipeline, building it on first use.

        config and transport only take effect on that first call.
        """
        if cls._instance is None:
            cls._instance = cls(config, transport)
        return cls._instance

    @classmethod
    def reset(cls):
        """Drop the cached pipeline so the next call rebuilds it."""
        cls._instance = None

    def get_processor(self) -> BatchProcessor:
        return self.processor

    def get_publisher(self) -> EventPublisher:
        return self.publisher

    def __repr__(self) -> str:
        return (
            f"PipelineBootstrap(publish={self.transport.name}, "
            f"general={self.config.general_channel or 'unset'}, "
            f"media={self.config.media_channel or 'unset'})"
        )


def bootstrap_pipeline(
    config: Optional[PipelineConfig] = None,
    transport: Optional[ChannelTransport] = None,
) -> PipelineBootstrap:
    """
    Bootstrap the batch pipeline.

    Without arguments the pipeline is built from the environment.
    """
    return PipelineBootstrap.get_instance(config, transport)

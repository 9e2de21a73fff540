#!/usr/bin/env python3
"""
kubechat - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Runs the HTTP chat adapter

All business logic is in the modules, following black box principles.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from typing import Dict, Optional, Tuple

import redis.asyncio as redis
import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from kubechat import __version__
from kubechat.config.provider import ConfigProvider, EnvConfigProvider
from kubechat.errors import PersistenceError
from kubechat.logging_config import get_logging_config
from kubechat.modules.api import CommandRequest, CommandResponse, HealthResponse
from kubechat.modules.bot import ChannelNotifierHandler, MentionExtractor, extractor_for
from kubechat.modules.config import CommPlatformIntegration, ConfigWatcher, Platform
from kubechat.modules.executor import (
    Conversation,
    DefaultExecutorFactory,
    DefaultExecutorFactoryParams,
    InMemoryFilterEngine,
    KubectlNamespaceLister,
    KubectlResourceNameLister,
    KubectlRunner,
    LoggingAnalyticsReporter,
    NewDefaultInput,
)
from kubechat.modules.storage import (
    InMemoryConfigPersistenceManager,
    StorageModule,
)

log_config.dictConfig(get_logging_config())
logger = logging.getLogger("kubechat.main")

# Configuration provider (centralized config access)
config_provider: ConfigProvider = EnvConfigProvider()

# Module instances (initialized at startup)
config_watcher: Optional[ConfigWatcher] = None
storage_module: Optional[StorageModule] = None
persistence = None
executor_factory: Optional[DefaultExecutorFactory] = None
notifier_handlers: Dict[Tuple[str, CommPlatformIntegration], ChannelNotifierHandler] = {}


async def _restore_filters(engine: InMemoryFilterEngine) -> None:
    """Apply filter states persisted by earlier `filters enable|disable` commands."""
    for name in engine.registered_filters():
        try:
            enabled = await persistence.get_filter_enabled(name)
        except PersistenceError as e:
            logger.warning(f"Cannot restore state of filter {name!r}: {e}")
            continue
        if enabled is not None:
            engine.set_filter_enabled(name, enabled)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - initialize and cleanup resources.
    """
    global config_watcher, storage_module, persistence, executor_factory

    # Startup
    logger.info("Starting kubechat...")
    runtime = config_provider.get_runtime_config()

    config_watcher = ConfigWatcher(runtime.config_path)
    config_watcher.start()

    if runtime.persistence_enabled:
        storage_module = StorageModule(runtime.redis_url, runtime.redis_password)
        persistence = await storage_module.persistence_manager()
        logger.info("Persisting chat changes to Redis")
    else:
        persistence = InMemoryConfigPersistenceManager()
        logger.warning("REDIS_URL not set, chat changes are kept in memory only")

    filter_engine = InMemoryFilterEngine(config_watcher.get().filters)
    await _restore_filters(filter_engine)

    runner = KubectlRunner(timeout=runtime.command_timeout)
    executor_factory = DefaultExecutorFactory(
        DefaultExecutorFactoryParams(
            config_source=config_watcher,
            cmd_runner=runner,
            cfg_manager=persistence,
            analytics_reporter=LoggingAnalyticsReporter(),
            namespace_lister=KubectlNamespaceLister(runner),
            resource_name_lister=KubectlResourceNameLister(runner),
            filter_engine=filter_engine,
        )
    )

    logger.info(f"kubechat started for cluster {config_watcher.get().settings.cluster_name!r}")

    yield

    # Shutdown
    logger.info("Shutting down kubechat...")
    config_watcher.stop()
    if storage_module:
        await storage_module.disconnect()
        storage_module = None
    notifier_handlers.clear()
    logger.info("kubechat shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="kubechat",
    description="kubechat - Operate Kubernetes from your chat",
    version=__version__,
    lifespan=lifespan,
)


async def _notifier_handler(
    group: str, platform: CommPlatformIntegration, platform_cfg: Platform, extractor: MentionExtractor
) -> ChannelNotifierHandler:
    key = (group, platform)
    handler = notifier_handlers.get(key)
    if handler is None:
        handler = ChannelNotifierHandler(extractor.mention(), platform_cfg.channels)
        await _restore_notifications(handler, group, platform, platform_cfg)
        handler = notifier_handlers.setdefault(key, handler)
    return handler


async def _restore_notifications(
    handler: ChannelNotifierHandler, group: str, platform: CommPlatformIntegration, platform_cfg: Platform
) -> None:
    """Apply notification states persisted by earlier `notifier start|stop` commands."""
    for alias, channel in platform_cfg.channels.items():
        try:
            enabled = await persistence.get_notifications_enabled(group, platform, alias)
        except PersistenceError as e:
            logger.warning(f"Cannot restore notification state of {alias!r}: {e}")
            continue
        if enabled is not None:
            handler.set_notifications_enabled(channel.name, enabled)


async def _source_bindings(request: CommandRequest, alias: str, configured: Tuple[str, ...]) -> Tuple[str, ...]:
    """Source bindings edited from chat take precedence over the configured ones."""
    try:
        persisted = await persistence.get_source_bindings(request.group, request.platform, alias)
    except PersistenceError as e:
        logger.warning(f"Cannot read persisted source bindings of {alias!r}: {e}")
        return configured
    return tuple(persisted) if persisted is not None else configured


@app.post("/v1/commands", response_model=CommandResponse)
async def handle_command(request: CommandRequest) -> CommandResponse:
    """
    Handle one chat message addressed to the bot.

    Returns:
        200: Message to render, or null if the bot was not mentioned
        404: Unknown communication group or platform
        503: Service not initialized
    """
    if not executor_factory or not config_watcher:
        raise HTTPException(503, "Service not initialized")

    cfg = config_watcher.get()
    group = cfg.communications.get(request.group)
    if group is None:
        raise HTTPException(404, f"Unknown communication group {request.group!r}")

    platform_cfg = group.platform(request.platform)
    if platform_cfg is None or not platform_cfg.enabled:
        raise HTTPException(404, f"Platform {request.platform.value!r} is not enabled in group {request.group!r}")

    extractor = extractor_for(request.platform, platform_cfg.bot_name, platform_cfg.bot_id)
    text, mentioned = extractor.extract(request.text)
    if not mentioned:
        return CommandResponse(message=None)

    found = platform_cfg.channel_by_name(request.channel)
    if found is not None:
        alias, channel = found
        conversation = Conversation(
            alias=alias,
            id=channel.name,
            executor_bindings=channel.bindings.executors,
            source_bindings=await _source_bindings(request, alias, channel.bindings.sources),
            is_authenticated=True,
            command_origin=request.origin,
            state=request.state,
        )
    else:
        # channels missing from the configuration get every executor, subject to restrictAccess
        conversation = Conversation(
            alias=request.channel,
            id=request.channel,
            executor_bindings=tuple(cfg.executors),
            is_authenticated=False,
            command_origin=request.origin,
            state=request.state,
        )

    executor = executor_factory.new_default(
        NewDefaultInput(
            comm_group_name=request.group,
            platform=request.platform,
            notifier_handler=await _notifier_handler(request.group, request.platform, platform_cfg, extractor),
            conversation=conversation,
            message=text,
            user=request.user,
        )
    )
    message = await executor.execute()
    return CommandResponse(message=None if message.is_empty() else message)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns:
        200: Service healthy
        503: Service unhealthy
    """
    if not config_watcher or not executor_factory:
        return JSONResponse(status_code=503, content={"status": "unhealthy", "modules": "not initialized"})

    cluster_name = config_watcher.get().settings.cluster_name
    persistence_status = "memory"
    if storage_module:
        try:
            reachable = await storage_module.is_reachable()
            error = None if reachable else "not connected"
        except redis.RedisError as e:
            error = str(e)
        if error:
            logger.error(f"Health check failed: {error}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "persistence": "disconnected", "error": error},
            )
        persistence_status = "redis"

    return HealthResponse(
        status="healthy",
        version=__version__,
        cluster_name=cluster_name,
        persistence=persistence_status,
    )


# Error handlers


@app.exception_handler(redis.ConnectionError)
async def redis_error_handler(request, exc):
    """Handle Redis connection errors."""
    logger.error(f"Redis connection error: {exc}")
    return JSONResponse(status_code=503, content={"error": "Database connection failed"})


@app.exception_handler(ValueError)
async def validation_error_handler(request, exc):
    """Handle validation errors."""
    logger.error(f"Validation error: {exc}")
    return JSONResponse(status_code=400, content={"error": str(exc)})


if __name__ == "__main__":
    api_config = config_provider.get_api_config()
    # Use dict config for logging, not file path
    uvicorn.run(
        "kubechat.main:app",
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        reload=api_config.debug,
        log_config=get_logging_config(api_config.log_level),
    )

"""
kubechat - Chat-operated control plane for Kubernetes

Users address the bot from a chat platform; the bot parses the message,
validates the requested action against the configured policy, executes it
and returns a platform-agnostic message tree that each chat adapter renders.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No server-side session state: interactive flows live in the message payloads

Modules:
- config: Policy source, YAML loading and snapshot publishing
- interactive: Platform-agnostic message model and help content
- kubectl: Policy merger, command guard and execution checker
- executor: Command dispatcher, sub-handlers and executor factory
- bot: Mention extraction and per-channel notifier state
- storage: Redis connection and configuration persistence
- api: HTTP request and response contracts
"""

__version__ = "1.0.0"

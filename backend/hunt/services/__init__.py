"""Session domain services: registry, membership, broadcast and answers.

Socket handlers and HTTP routes talk to ``SessionCoordinator`` only,
keeping transport concerns separated from core game mechanics.
"""
from hunt.services.coordinator import SessionCoordinator, build_questions

__all__ = ['SessionCoordinator', 'build_questions']

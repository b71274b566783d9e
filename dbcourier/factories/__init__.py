from .strategy_factory import BackupStrategyFactory, build_dump_commands

__all__ = ['BackupStrategyFactory', 'build_dump_commands']

from .config import LogLevel, SelectionConfig, load_config_from_env
from .exceptions import (
    ConfigurationError,
    DuplicateNodeError,
    PermTreeError,
    PersistenceError,
    SessionStateError,
    TreeConstructionError,
    TreeCycleError,
    UnknownNodeError,
)
from .expansion import expand_to, prune_expansion, toggle_expanded
from .logging import (
    SelectionFormatter,
    SessionLoggerAdapter,
    get_session_logger,
    safe_preview,
    setup_logging,
)
from .selection import (
    DisplayState,
    SelectionEngine,
    SelectionMode,
    compute_visual,
    toggle_selection,
    visual_selection,
)
from .session import (
    PermissionEditSession,
    PermissionStore,
    SelectionDiff,
    SessionState,
    diff_selection,
    seed_selection,
)
from .tree import (
    NodeRecord,
    PermissionGrant,
    TreeNode,
    all_ids_of,
    ancestors_of,
    build_tree,
    descendants_of,
    find_node,
    index_nodes,
    iter_nodes,
    iter_postorder,
    parent_of,
)

__all__ = [
    'LogLevel',
    'SelectionConfig',
    'load_config_from_env',
    'PermTreeError',
    'ConfigurationError',
    'TreeConstructionError',
    'DuplicateNodeError',
    'TreeCycleError',
    'UnknownNodeError',
    'SessionStateError',
    'PersistenceError',
    'safe_preview',
    'SelectionFormatter',
    'SessionLoggerAdapter',
    'setup_logging',
    'get_session_logger',
    'TreeNode',
    'NodeRecord',
    'PermissionGrant',
    'build_tree',
    'find_node',
    'descendants_of',
    'all_ids_of',
    'parent_of',
    'ancestors_of',
    'index_nodes',
    'iter_nodes',
    'iter_postorder',
    'SelectionMode',
    'DisplayState',
    'SelectionEngine',
    'compute_visual',
    'toggle_selection',
    'visual_selection',
    'toggle_expanded',
    'expand_to',
    'prune_expansion',
    'PermissionEditSession',
    'PermissionStore',
    'SelectionDiff',
    'SessionState',
    'diff_selection',
    'seed_selection',
]

# Authentication module

from edupro.modules.auth.actors import (
    ActorRole,
    ActorKind,
    ACTOR_KINDS,
    get_actor_kind,
    issue_session,
)

from edupro.modules.auth.dependencies import (
    require_actor,
    get_current_admin,
    get_current_student,
    get_current_teacher,
    get_current_coach,
)

from .commits import (
    COMMIT_MEASURE_FORMAT,
    commit_measure_command,
    commit_measures,
    dump_history,
    latest_commit_measure,
    read_latest_commit_measure,
)

from .exclusions import (
    format_exclusion,
    get_exclusions,
    parse_exclusion,
    read_exclusions,
)

from .git import (
    GitProcess,
    git_log_argv,
    head_revision,
    write_note,
)

from .writer import (
    persist_measures,
    record_exclusion,
)

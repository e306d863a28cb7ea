"""GitLab API clients and request helpers."""

from gitlab_provisioner.clients.options import (
    CreateVariableOptions,
    GetVariableOptions,
    RemoveVariableOptions,
    UpdateVariableOptions,
    VariableFilter,
)
from gitlab_provisioner.clients.variables import (
    GitLabVariableClient,
    VariableClient,
    diff_variable,
    generate_create_variable_options,
    generate_get_variable_options,
    generate_remove_variable_options,
    generate_update_variable_options,
    generate_variable_filter,
    is_variable_not_found,
    is_variable_up_to_date,
    late_initialize_variable,
    variable_to_parameters,
)

__all__ = [
    "CreateVariableOptions",
    "GetVariableOptions",
    "GitLabVariableClient",
    "RemoveVariableOptions",
    "UpdateVariableOptions",
    "VariableClient",
    "VariableFilter",
    "diff_variable",
    "generate_create_variable_options",
    "generate_get_variable_options",
    "generate_remove_variable_options",
    "generate_update_variable_options",
    "generate_variable_filter",
    "is_variable_not_found",
    "is_variable_up_to_date",
    "late_initialize_variable",
    "variable_to_parameters",
]

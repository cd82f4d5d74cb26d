# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Built-in usage and help templates.

The templates are plain Jinja2 source with no block trimming: every newline
in the text below appears in the output, and sections start with the blank
line that separates them from the previous one.
"""

from __future__ import annotations

from typing import Final

_USAGE_HEAD: Final[str] = (
    "Usage:{% if cmd.runnable %}\n"
    "  {{ cmd.use_line }}{% endif %}"
)

_USAGE_BODY: Final[str] = (
    "{% if cmd.has_available_sub_commands %}\n"
    "  {{ cmd.command_path }} [command]{% endif %}"
    "{% if cmd.aliases %}\n"
    "\n"
    "Aliases:\n"
    "  {{ cmd.name_and_aliases }}{% endif %}"
    "{% if cmd.has_example %}\n"
    "\n"
    "Examples:\n"
    "{{ cmd.example }}{% endif %}"
    "{% if cmd.has_available_sub_commands %}{% if not cmd.groups %}\n"
    "\n"
    "Available Commands:"
    "{% for sub in cmd.commands %}{% if sub.is_available_command or sub.name == 'help' %}\n"
    "  {{ sub.name | rpad(sub.name_padding) }} {{ sub.short }}{% endif %}{% endfor %}"
    "{% else %}{% for group in cmd.groups %}\n"
    "\n"
    "{{ group.title }}"
    "{% for sub in cmd.commands %}"
    "{% if sub.group_id == group.id and (sub.is_available_command or sub.name == 'help') %}\n"
    "  {{ sub.name | rpad(sub.name_padding) }} {{ sub.short }}{% endif %}{% endfor %}{% endfor %}"
    "{% if not cmd.all_child_commands_have_group %}\n"
    "\n"
    "Additional Commands:"
    "{% for sub in cmd.commands %}"
    "{% if sub.group_id == '' and (sub.is_available_command or sub.name == 'help') %}\n"
    "  {{ sub.name | rpad(sub.name_padding) }} {{ sub.short }}{% endif %}{% endfor %}"
    "{% endif %}{% endif %}{% endif %}"
)

_USAGE_TAIL: Final[str] = (
    "{% if cmd.has_available_local_flags %}\n"
    "\n"
    "Flags:\n"
    "{{ cmd.local_flags().flag_usages() | trim_trailing_whitespaces }}{% endif %}"
    "{% if cmd.has_available_inherited_flags %}\n"
    "\n"
    "Global Flags:\n"
    "{{ cmd.inherited_flags().flag_usages() | trim_trailing_whitespaces }}{% endif %}"
    "{% if cmd.has_help_sub_commands %}\n"
    "\n"
    "Additional help topics:"
    "{% for sub in cmd.commands %}{% if sub.is_additional_help_topic_command %}\n"
    "  {{ sub.command_path | rpad(sub.command_path_padding) }} {{ sub.short }}{% endif %}{% endfor %}"
    "{% endif %}"
    "{% if cmd.has_available_sub_commands %}\n"
    "\n"
    'Use "{{ cmd.command_path }} [command] --help" for more information about a command.{% endif %}\n'
)

_OPTIONS_SECTIONS: Final[str] = (
    "{% if cmd.has_options %}\n"
    "\n"
    "Options:"
    "{% for opt in cmd.opts %}\n"
    "  {{ opt.args | slice_to_csv }}\t{{ opt.desc }}{% endfor %}{% endif %}"
    "{% if cmd.has_profiles %}\n"
    "\n"
    "Profiles:"
    "{% for prof in cmd.profiles %}\n"
    "  {{ prof.args | slice_to_csv }}\t{{ prof.desc }}\n"
    "    ↳ Options:\t{{ prof.opts | slice_to_csv }}{% endfor %}{% endif %}"
)

DEFAULT_USAGE_TEMPLATE: Final[str] = _USAGE_HEAD + _USAGE_BODY + _USAGE_TAIL

DEFAULT_HELP_TEMPLATE: Final[str] = (
    "{% set description = cmd.long or cmd.short %}"
    "{% if description %}{{ description | trim_trailing_whitespaces }}\n"
    "\n"
    "{% endif %}"
    "{% if cmd.runnable or cmd.has_sub_commands %}{{ cmd.usage_string() }}{% endif %}"
)

OPTIONS_TEMPLATE: Final[str] = (
    _USAGE_HEAD + "{% if cmd.has_options %} [options]{% endif %}" + _USAGE_BODY + _OPTIONS_SECTIONS + _USAGE_TAIL
)

__all__ = ["DEFAULT_HELP_TEMPLATE", "DEFAULT_USAGE_TEMPLATE", "OPTIONS_TEMPLATE"]

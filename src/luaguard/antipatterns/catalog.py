"""Built-in anti-pattern catalog for Roblox Luau.

Rules are evaluated in the order of ``DEFAULT_CATALOG``; that order is
also the order of hits in a scan result.

Known false-positive classes (rules are advisory only):
- global-variable: assignments to upvalues and table-constructor fields
  written one per line look like globals.
- connection-not-disconnected: connections that are disconnected further
  than 100 characters away, or live for the whole session on purpose.
- instance-parent-nil: instances parented through the second argument of
  ``Instance.new``.
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from . import matchers
from .models import AntiPatternRule, RuleSeverity

# ==============================================================================
# PERFORMANCE KILLERS
# ==============================================================================

INFINITE_LOOP_NO_WAIT = AntiPatternRule(
    name="infinite-loop-no-wait",
    description="Infinite loop without wait() - will hang the server",
    severity=RuleSeverity.ERROR,
    matcher=matchers.infinite_loop_without_yield,
    fix="Call task.wait() inside the loop",
    example="while true do\n    task.wait(0.1)\n    -- work\nend",
    category="performance",
)

REPEAT_NO_WAIT = AntiPatternRule(
    name="repeat-no-wait",
    description="repeat loop without wait() - blocks the scheduler",
    severity=RuleSeverity.ERROR,
    matcher=matchers.repeat_without_yield,
    fix="Call task.wait() inside the repeat loop",
    category="performance",
)

FOR_LOOP_EXCESSIVE = AntiPatternRule(
    name="for-loop-excessive",
    description="Numeric for loop with 10000+ iterations and no yield",
    severity=RuleSeverity.WARNING,
    pattern=re.compile(r"for\s+\w+\s*=\s*\d+\s*,\s*(\d{5,})"),
    fix="Split the work into chunks or call task.wait() every 1000 items",
    category="performance",
)

# ==============================================================================
# MEMORY LEAKS
# ==============================================================================

CONNECTION_NOT_DISCONNECTED = AntiPatternRule(
    name="connection-not-disconnected",
    description="Connection never disconnected - potential memory leak",
    severity=RuleSeverity.WARNING,
    pattern=re.compile(r":Connect\s*\([^)]*\)(?![\s\S]{0,100}:Disconnect\(\))"),
    fix="Keep the connection and call :Disconnect() when it is no longer needed",
    example=(
        "local connection = event:Connect(function() end)\n"
        "-- later:\n"
        "connection:Disconnect()"
    ),
    category="memory",
)

INSTANCE_PARENT_NIL = AntiPatternRule(
    name="instance-parent-nil",
    description="Instance created without setting Parent right away",
    severity=RuleSeverity.INFO,
    pattern=re.compile(r"Instance\.new\s*\([^)]+\)(?!\.Parent|[\s\S]{0,20}\.Parent\s*=)"),
    fix="Set every property first, then set Parent last to avoid repeated replication",
    example=(
        "local part = Instance.new('Part')\n"
        "part.Size = Vector3.new(4, 1, 2)\n"
        "part.Parent = workspace -- always last"
    ),
    category="memory",
)

# ==============================================================================
# DEPRECATED / DANGEROUS
# ==============================================================================

WAIT_DEPRECATED = AntiPatternRule(
    name="wait-deprecated",
    description="wait() is deprecated, use task.wait()",
    severity=RuleSeverity.WARNING,
    pattern=re.compile(r"(?<![.:\w])wait\s*\("),
    fix="Replace wait() with task.wait()",
    category="deprecated",
)

SPAWN_DEPRECATED = AntiPatternRule(
    name="spawn-deprecated",
    description="spawn() is deprecated, use task.spawn()",
    severity=RuleSeverity.WARNING,
    pattern=re.compile(r"(?<![.:\w])spawn\s*\("),
    fix="Replace spawn() with task.spawn()",
    category="deprecated",
)

DELAY_DEPRECATED = AntiPatternRule(
    name="delay-deprecated",
    description="delay() is deprecated, use task.delay()",
    severity=RuleSeverity.WARNING,
    pattern=re.compile(r"(?<![.:\w])delay\s*\("),
    fix="Replace delay() with task.delay()",
    category="deprecated",
)

# ==============================================================================
# SECURITY
# ==============================================================================

LOADSTRING_USAGE = AntiPatternRule(
    name="loadstring-usage",
    description="loadstring() is dangerous and disabled by default",
    severity=RuleSeverity.ERROR,
    pattern=re.compile(r"\bloadstring\s*\("),
    fix="Avoid loadstring; use ModuleScripts instead",
    category="security",
)

REMOTE_NO_VALIDATION = AntiPatternRule(
    name="remote-no-validation",
    description="RemoteEvent handler without validation of client data",
    severity=RuleSeverity.WARNING,
    pattern=re.compile(
        r"OnServerEvent:Connect\s*\(\s*function\s*\([^)]*\)(?![\s\S]{0,50}?\b(?:if|assert|type)\b)"
    ),
    fix="Always validate data received from the client",
    example=(
        "remoteEvent.OnServerEvent:Connect(function(player, data)\n"
        "    if type(data) ~= 'table' then return end\n"
        "    -- validate further...\n"
        "end)"
    ),
    category="security",
)

# ==============================================================================
# BAD PRACTICES
# ==============================================================================

GLOBAL_VARIABLE = AntiPatternRule(
    name="global-variable",
    description="Global variable assignment (pollutes the environment)",
    severity=RuleSeverity.WARNING,
    pattern=re.compile(r"^(?![ \t]*local\b)[ \t]*([A-Za-z_]\w*)[ \t]*=(?!=)", re.MULTILINE),
    fix="Declare every variable with 'local'",
    category="practice",
)

FINDFIRSTCHILD_CHAIN = AntiPatternRule(
    name="findfirstchild-chain",
    description="FindFirstChild chain without nil checks",
    severity=RuleSeverity.WARNING,
    pattern=re.compile(r":FindFirstChild\([^)]+\):FindFirstChild"),
    fix="Check each FindFirstChild result before going further",
    example=(
        "local child1 = parent:FindFirstChild('Name')\n"
        "if child1 then\n"
        "    local child2 = child1:FindFirstChild('SubName')\n"
        "end"
    ),
    category="practice",
)

HUMANOID_DIED_MEMORY = AntiPatternRule(
    name="humanoid-died-memory",
    description="Humanoid.Died handler without cleanup can leak memory",
    severity=RuleSeverity.INFO,
    pattern=re.compile(r"Humanoid\.Died:Connect"),
    fix="Disconnect connections when the character is destroyed",
    category="practice",
)

# ==============================================================================
# ROBLOX-SPECIFIC PERFORMANCE
# ==============================================================================

TOUCHED_NO_DEBOUNCE = AntiPatternRule(
    name="touched-no-debounce",
    description="Touched handler without debounce - fires repeatedly",
    severity=RuleSeverity.WARNING,
    matcher=matchers.touched_without_debounce,
    fix="Add a debounce flag to ignore repeated touches",
    example=(
        "local debounce = false\n"
        "part.Touched:Connect(function(hit)\n"
        "    if debounce then return end\n"
        "    debounce = true\n"
        "    -- work\n"
        "    task.wait(1)\n"
        "    debounce = false\n"
        "end)"
    ),
    category="performance",
)

GETCHILDREN_IN_LOOP = AntiPatternRule(
    name="getchildren-in-loop",
    description="GetChildren/GetDescendants inside a loop - very slow",
    severity=RuleSeverity.WARNING,
    matcher=matchers.children_query_in_loop,
    fix="Cache the GetChildren result before the loop",
    example=(
        "local children = parent:GetChildren()\n"
        "for i, child in ipairs(children) do\n"
        "    -- use child\n"
        "end"
    ),
    category="performance",
)

MAGNITUDE_COMPARISON = AntiPatternRule(
    name="magnitude-squared",
    description="Distance comparison through Magnitude",
    severity=RuleSeverity.INFO,
    pattern=re.compile(r"\.Magnitude\s*[<>]=?\s*\d+"),
    fix="Compare (position1 - position2).Magnitude against the distance once per check",
    example="if (pos1 - pos2).Magnitude < 50 then",
    category="performance",
)

PARENT_NIL_INSTEAD_OF_DESTROY = AntiPatternRule(
    name="parent-nil-instead-of-destroy",
    description="Parent set to nil instead of calling :Destroy()",
    severity=RuleSeverity.INFO,
    pattern=re.compile(r"\.\s*Parent\s*=\s*nil\b"),
    fix="Call :Destroy() so connections and children are released",
    category="memory",
)

ENVIRONMENT_MANIPULATION = AntiPatternRule(
    name="environment-manipulation",
    description="getfenv/setfenv disable Luau optimizations and can compromise security",
    severity=RuleSeverity.WARNING,
    pattern=re.compile(r"\b(?:getfenv|setfenv)\s*\("),
    fix="Pass dependencies explicitly or require a ModuleScript",
    category="security",
)


DEFAULT_CATALOG: Tuple[AntiPatternRule, ...] = (
    INFINITE_LOOP_NO_WAIT,
    REPEAT_NO_WAIT,
    FOR_LOOP_EXCESSIVE,
    CONNECTION_NOT_DISCONNECTED,
    INSTANCE_PARENT_NIL,
    WAIT_DEPRECATED,
    SPAWN_DEPRECATED,
    DELAY_DEPRECATED,
    LOADSTRING_USAGE,
    REMOTE_NO_VALIDATION,
    GLOBAL_VARIABLE,
    FINDFIRSTCHILD_CHAIN,
    HUMANOID_DIED_MEMORY,
    TOUCHED_NO_DEBOUNCE,
    GETCHILDREN_IN_LOOP,
    MAGNITUDE_COMPARISON,
    PARENT_NIL_INSTEAD_OF_DESTROY,
    ENVIRONMENT_MANIPULATION,
)


def rules_by_name(catalog: Tuple[AntiPatternRule, ...] = DEFAULT_CATALOG) -> Dict[str, AntiPatternRule]:
    """Index a catalog by rule name, rejecting duplicates."""
    index: Dict[str, AntiPatternRule] = {}
    for rule in catalog:
        if rule.name in index:
            raise ValueError(f"Duplicate anti-pattern rule name: {rule.name!r}")
        index[rule.name] = rule
    return index


def select_rules(
    disabled: Tuple[str, ...] = (), catalog: Tuple[AntiPatternRule, ...] = DEFAULT_CATALOG
) -> List[AntiPatternRule]:
    """Catalog rules minus ``disabled``, in catalog order.

    Raises:
        ValueError: If a disabled name is not in the catalog
    """
    index = rules_by_name(catalog)
    unknown = [name for name in disabled if name not in index]
    if unknown:
        raise ValueError(f"Unknown anti-pattern rule(s): {', '.join(unknown)}")
    return [rule for rule in catalog if rule.name not in disabled]

from termcolor import colored

from xcpkg.checks import Issue, IssueList, Severity

###############################################################################
# Output prefixes
###############################################################################

CHECKMARK    = '[' + colored("✓", "green") + ']'
CROSSMARK    = '[' + colored("✗", "red") + ']'
QUESTIONMARK = '[' + colored("?", "yellow") + ']'
INFOMARK     = '[' + colored("i", "blue") + ']'

def _message(prefix: str, raw_prefix: str, *args):
    msg = '\n'.join(str(arg) for arg in args)
    first = True
    for line in msg.split('\n'):
        if first: print(f"{prefix} {line}")
        else:     print(f"{' ' * len(raw_prefix)} {line}")
        first = False

def error(*msg): _message(CROSSMARK, '[✗]', *msg)

def warning(*msg): _message(QUESTIONMARK, '[?]', *msg)

def info(*msg): _message(INFOMARK, '[i]', *msg)

def success(*msg): _message(CHECKMARK, '[✓]', *msg)


###############################################################################
# Issues
###############################################################################

def format_issue(issue: Issue) -> str:
    """
    Renders an issue as ``<object ids> > <message>``.
    """
    where = f"{issue.location} > " if issue.location is not None else '> '
    return where + issue.message

def report(issues: Issue | IssueList | list) -> None:
    if isinstance(issues, (IssueList, list)):
        for issue in issues:
            report(issue)
        return

    match issues.severity:
        case Severity.ERROR | Severity.CRITICAL:
            error(format_issue(issues))
        case Severity.WARNING:
            warning(format_issue(issues))
        case Severity.INFO:
            info(format_issue(issues))

"""Main entry point for the Jira assistant.

Loads environment variables, validates configuration, and runs one of the
sub-commands: duplicate check, issue creation, free-text search, or the
service health check.
"""
from dotenv import load_dotenv
import argparse
import asyncio
import sys

# Load environment variables first, before any other imports
load_dotenv()

from jira_agent.config import get_config
from jira_agent.dedup import build_detector, present_analysis
from jira_agent.gateway import AsyncGatewayClient
from jira_agent.healthcheck import run_health_checks
from jira_agent.interaction import ConsoleChannel
from jira_agent.utils.logger import log_agent_progress, log_error, set_log_level
from jira_agent.utils.retry import OperationRunner, RetryConfig, RetryController
from jira_agent.workflows import PRIORITIES, IssueCreationFlow, IssueDetails, search_issues


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create and search Jira issues with duplicate detection.")
    parser.add_argument('--log-level', type=str, help='Override LOG_LEVEL (DEBUG, INFO, ...).')
    sub = parser.add_subparsers(dest='command', required=True)

    check = sub.add_parser('check', help='Check a prospective issue for duplicates.')
    check.add_argument('--project', required=True, help='Jira project key.')
    check.add_argument('--title', required=True, help='Issue title.')
    check.add_argument('--description', default='', help='Issue description.')

    create = sub.add_parser('create', help='Create an issue after a duplicate check.')
    create.add_argument('--project', required=True, help='Jira project key.')
    create.add_argument('--title', required=True, help='Issue title.')
    create.add_argument('--description', default='', help='Issue description.')
    create.add_argument('--type', dest='issue_type', default='Task', help='Issue type (default: Task).')
    create.add_argument('--priority', default='Medium', choices=PRIORITIES, help='Issue priority.')
    create.add_argument('--assignee', default=None, help='Optional assignee account id.')

    search = sub.add_parser('search', help='Free-text issue search.')
    search.add_argument('query', help='Search text.')

    sub.add_parser('health', help='Check connectivity to the generation service and gateway.')
    return parser


async def run(args) -> int:
    config = get_config()
    channel = ConsoleChannel()

    if args.command == 'health':
        all_healthy, _ = await run_health_checks(verbose=True)
        return 0 if all_healthy else 1

    issues = config.validate_configuration()
    if issues:
        log_error("Configuration validation failed", issues=issues)
        print("❌ Configuration issues found:")
        for issue in issues:
            print(f"  - {issue}")
        print("\nPlease fix these issues and try again.")
        return 1

    controller = RetryController(channel, RetryConfig.from_config(config))
    runner = OperationRunner(controller)

    async with AsyncGatewayClient(config) as client:
        if args.command == 'search':
            await search_issues(client, args.query, channel)
            return 0

        detector = build_detector(client, config, runner=runner, channel=channel)

        if args.command == 'check':
            analysis = await detector.check_for_duplicates(args.project, args.title, args.description)
            proceed = await present_analysis(analysis, channel)
            return 0 if proceed else 2

        flow = IssueCreationFlow(client, detector, runner, channel)
        result = await flow.run(IssueDetails(
            project_key=args.project,
            issue_type=args.issue_type,
            title=args.title,
            description=args.description,
            priority=args.priority,
            assignee=args.assignee,
        ))
        return 0 if result is not None else 1


def main() -> None:
    args = build_parser().parse_args()
    config = get_config()
    set_log_level(args.log_level or config.log_level)
    config.log_configuration()

    log_agent_progress("Starting assistant", command=args.command)
    try:
        exit_code = asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\nInterrupted.")
        exit_code = 130
    log_agent_progress("Assistant finished", exit_code=exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

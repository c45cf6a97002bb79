if __name__ == '__main__':
    from argparse import ArgumentParser, RawTextHelpFormatter
    from collector.defaults import *
    import collector

    argparser = ArgumentParser(
        prog=f'python -m {collector.__name__}',
        formatter_class=RawTextHelpFormatter,
        description='A script for printing a report about a GitHub repository as JSON',
        add_help=False,
        )

    argparser.add_argument(
        '-h',
        '--help',
        action='help',
        help='If specified, the script shows this help message and exits.',
        )
    argparser.add_argument(
        'repository',
        help='The repository of the form owner/name.',
        )
    argparser.add_argument(
        '--github-token',
        help='A GitHub authentication token.\n'
             'Defaults to the value of environmental variable GITHUB_TOKEN.',
        )
    argparser.add_argument(
        '--github-api-url',
        default=DEFAULT_GITHUB_API_URL,
        help=f'The base URL of GitHub REST API.\n'
             f'Defaults to {DEFAULT_GITHUB_API_URL}.',
        )
    argparser.add_argument(
        '--trends-timeout',
        type=float,
        default=DEFAULT_TRENDS_TIMEOUT,
        help=f'The timeout in seconds for requests to Google Trends.\n'
             f'Defaults to {DEFAULT_TRENDS_TIMEOUT}.',
        )
    argparser.add_argument(
        '--log-level',
        default='INFO',
        help='The level of logging. Logs are written to stderr.\n'
             'Defaults to INFO.',
        )

    params = argparser.parse_args()
    from logging import Formatter
    from collector.aggregate import RepositoryAggregator
    from common.logging import init_logging
    from common.models import MalformedIdentifierError
    from server.models import Settings

    init_logging(
        params.log_level,
        formatter=Formatter(
            fmt='{asctime} [{name}] {levelname:<8} {message}',
            datefmt='%Y-%m-%d %H:%M:%S',
            style='{',
            ),
        )

    github_token = params.github_token or Settings().github_token
    if not github_token:
        argparser.error('GitHub token is required, set GITHUB_TOKEN or pass --github-token')

    aggregator = RepositoryAggregator.create(
        github_token,
        github_api_url=params.github_api_url,
        trends_timeout=params.trends_timeout,
        )
    try:
        report = aggregator.fetch_report(params.repository)
    except MalformedIdentifierError as e:
        argparser.error(str(e))

    print(report.model_dump_json(by_alias=True, indent=2))

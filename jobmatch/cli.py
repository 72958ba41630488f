"""
JobMatch CLI - Command line interface for the resume/job matching engine.

Usage:
    python -m jobmatch [command] [options]

Commands:
    score       Score one resume against one job
    batch       Score and rank one resume against many jobs
    summary     Summarize the scored candidates of a job
    compare     Compare two scored candidates
    config      Manage configuration

Examples:
    python -m jobmatch score --resume resume.json --job job.json
    python -m jobmatch batch --resume resume.json --jobs jobs.json --top 5
    python -m jobmatch score --resume resume.json --job job.json --strategy external --json
    python -m jobmatch summary --records records.json
    python -m jobmatch compare --records records.json --first c1 --second c2
"""

import argparse
import json
import sys

from jobmatch.core import DeterministicStrategy, MatchingError, MatchingService, ProfileMapper
from jobmatch.core.errors import InvalidInput
from jobmatch.reporting import compare_candidates, summarize_job_matches
from jobmatch.utils import Config, configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobmatch",
        description="JobMatch - Resume/job matching engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", help="Path to config file (default: ~/.jobmatch/config.json)")
    parser.add_argument("--log-level", help="Override logging.level (DEBUG, INFO, WARNING, ...)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Score command
    score_parser = subparsers.add_parser("score", help="Score one resume against one job")
    score_parser.add_argument("--resume", "-r", required=True, help="Path to resume file (JSON)")
    score_parser.add_argument("--job", "-j", required=True, help="Path to job file (JSON)")
    score_parser.add_argument("--strategy", "-s", default="deterministic", help="Scoring strategy")
    score_parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    # Batch command
    batch_parser = subparsers.add_parser("batch", help="Rank many jobs for one resume")
    batch_parser.add_argument("--resume", "-r", required=True, help="Path to resume file (JSON)")
    batch_parser.add_argument("--jobs", "-j", required=True, help="Path to jobs file (JSON list)")
    batch_parser.add_argument("--strategy", "-s", default="deterministic", help="Scoring strategy")
    batch_parser.add_argument("--concurrency", type=int, help="Worker count")
    batch_parser.add_argument("--top", "-t", type=int, default=10, help="Show top N matches")
    batch_parser.add_argument("--output", "-o", help="Output file (JSON)")

    # Summary command
    summary_parser = subparsers.add_parser("summary", help="Summarize scored candidates for a job")
    summary_parser.add_argument("--records", required=True, help="Path to match records file (JSON)")
    summary_parser.add_argument("--top", "-t", type=int, default=5, help="Number of top candidates")
    summary_parser.add_argument("--json", action="store_true", help="Print the summary as JSON")

    # Compare command
    compare_parser = subparsers.add_parser("compare", help="Compare two scored candidates")
    compare_parser.add_argument("--records", required=True, help="Path to match records file (JSON)")
    compare_parser.add_argument("--first", required=True, help="First candidate ID")
    compare_parser.add_argument("--second", required=True, help="Second candidate ID")
    compare_parser.add_argument("--json", action="store_true", help="Print the comparison as JSON")

    # Config command
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument("--show", action="store_true", help="Show current config")
    config_parser.add_argument("--set", nargs=2, metavar=("KEY", "VALUE"), help="Set a config value")
    config_parser.add_argument("--set-api-key", nargs=2, metavar=("PROVIDER", "KEY"), help="Set API key")
    config_parser.add_argument("--init", action="store_true", help="Initialize default config")

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        config = Config(args.config)
        configure_logging(args.log_level or config.get_log_level())

        if args.command == "score":
            cmd_score(args, config)
        elif args.command == "batch":
            cmd_batch(args, config)
        elif args.command == "summary":
            cmd_summary(args, config)
        elif args.command == "compare":
            cmd_compare(args, config)
        elif args.command == "config":
            cmd_config(args, config)
        else:
            parser.print_help()

    except KeyboardInterrupt:
        print("\n\nOperation cancelled.")
        sys.exit(1)
    except (MatchingError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _print_report(report) -> None:
    print(f"   📈 Match: {report.match_percentage}% ({report.band.value})")
    print(f"   Required Skills: {report.required_skills_match_percentage}%")
    print(f"   Preferred Skills: {report.preferred_skills_match_percentage}%")
    print(f"   Experience Relevance: {report.experience_relevance_percentage}%")
    if report.matching_skills:
        print(f"   ✅ Matching Skills: {', '.join(report.matching_skills)}")
    if report.missing_required_skills:
        print(f"   ❌ Missing Skills: {', '.join(report.missing_required_skills)}")


def cmd_score(args, config: Config):
    """Execute score command."""
    mapper = ProfileMapper()
    resume = mapper.load_resume(args.resume)
    job = mapper.load_job(args.job)

    service = MatchingService.from_config(config)
    report = service.score(resume, job, strategy=args.strategy)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return

    print(f"\n🎯 {job.title or 'Job'} ({report.strategy})\n")
    _print_report(report)

    strategy = service.get_strategy(args.strategy)
    if isinstance(strategy, DeterministicStrategy):
        breakdown = strategy.scorer.keyword_breakdown(resume, job)
        print(
            f"   Keywords: {breakdown.matched}/{breakdown.total_relevant} "
            f"(base {breakdown.base_score}, bonus +{breakdown.bonus})"
        )

    summary = getattr(report, "summary", "")
    if summary:
        print(f"\n   {summary}")


def cmd_batch(args, config: Config):
    """Execute batch command."""
    mapper = ProfileMapper()
    resume = mapper.load_resume(args.resume)
    jobs = mapper.load_jobs(args.jobs)
    print(f"🔍 Scoring {len(jobs)} jobs with '{args.strategy}'...")

    service = MatchingService.from_config(config)
    ranked = service.rank_jobs(resume, jobs, strategy=args.strategy, concurrency=args.concurrency)

    print(f"\n📊 Top {min(args.top, len(ranked))} Matches:\n")
    print("-" * 60)

    for i, (job, report) in enumerate(ranked[:args.top], 1):
        print(f"\n{i}. {job.title or '(untitled)'}")
        _print_report(report)

    if args.output:
        output_data = [
            {"job": job.to_dict(), "report": report.to_dict()}
            for job, report in ranked
        ]
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(output_data, f, indent=2)
        print(f"\n💾 Saved {len(ranked)} results to {args.output}")


def cmd_summary(args, config: Config):
    """Execute summary command."""
    records = ProfileMapper().load_records(args.records)
    summary = summarize_job_matches(records, top_n=args.top)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
        return

    print("\n📊 Match Summary")
    print("=" * 40)
    print(f"Analyzed Candidates: {summary.analyzed_count}")
    print(f"Average Match Score: {summary.average_match_score}%")
    print("\nBy Band:")
    for band, count in summary.score_distribution.items():
        print(f"  {band.title()}: {count}")

    if summary.top_candidates:
        print("\nTop Candidates:")
        for record in summary.top_candidates:
            name = record.candidate_name or record.candidate_id
            print(f"  {name}: {record.match_percentage}% [{record.status.value}]")

    if summary.common_strengths:
        print(f"\nCommon Strengths: {', '.join(summary.common_strengths)}")
    if summary.common_gaps:
        print(f"Common Gaps: {', '.join(summary.common_gaps)}")


def cmd_compare(args, config: Config):
    """Execute compare command."""
    records = {r.candidate_id: r for r in ProfileMapper().load_records(args.records)}

    for candidate_id in (args.first, args.second):
        if candidate_id not in records:
            raise InvalidInput(f"Candidate {candidate_id} not found in {args.records}")

    comparison = compare_candidates(records[args.first], records[args.second])

    if args.json:
        print(json.dumps(comparison.to_dict(), indent=2))
        return

    print(f"\n⚖️  {args.first} vs {args.second}\n")
    for dimension in comparison.dimensions:
        leader = dimension.leader or "tie"
        print(
            f"  {dimension.name.replace('_', ' ').title():<18} "
            f"{dimension.first:>3}% vs {dimension.second:>3}%  (diff {dimension.difference}, leader: {leader})"
        )

    if comparison.shared_strengths:
        print(f"\nShared Strengths: {', '.join(comparison.shared_strengths)}")


def cmd_config(args, config: Config):
    """Execute config command."""
    if args.init:
        config.save()
        print(f"✅ Created config at: {config.config_path}")

    elif args.show:
        print("\n📋 Current Configuration\n")
        config.print_config()

    elif args.set:
        key, value = args.set
        # Try to parse as JSON for numbers, booleans and lists
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            pass

        config.set(key, value)
        config.save()
        print(f"✅ Set {key} = {value}")

    elif args.set_api_key:
        provider, key = args.set_api_key
        config.set_api_key(provider, key)
        print(f"✅ Set API key for {provider}")

    else:
        print("Use --show, --set, --set-api-key, or --init")


if __name__ == "__main__":
    main()

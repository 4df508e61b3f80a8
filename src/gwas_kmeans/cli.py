"""
Command-line entry point.

Usage:
    gwas-kmeans summary_stats.txt --features LOGP ZSCORE A1FREQ --min-k 2 --max-k 8
    gwas-kmeans --synthetic 3 --seed 42 --json
"""

import argparse
import json
import sys
from typing import List, Optional

from .config import ClusteringConfig, Config, FilterOptions
from .data.generator import generate_clustered_data
from .data.normalization import NormalizationMethod
from .exceptions import GwasKMeansError
from .services.clustering_service import ClusteringService
from .utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = Config()
    clustering = defaults.clustering

    parser = argparse.ArgumentParser(
        prog="gwas-kmeans",
        description="Cluster GWAS summary statistics with k-means and pick K automatically",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("file", nargs="?", help="GWAS summary-statistics file")
    source.add_argument(
        "--synthetic",
        type=int,
        metavar="N",
        help="Cluster N synthetic blobs instead of reading a file",
    )

    parser.add_argument(
        "--features",
        nargs="+",
        default=list(defaults.filter_options.selected_features),
        help="Features to cluster on (default: %(default)s)",
    )
    parser.add_argument(
        "--normalization",
        default=NormalizationMethod.STANDARD.value,
        choices=[m.value for m in NormalizationMethod],
        help="Normalization method (default: %(default)s)",
    )
    parser.add_argument("--no-header", action="store_true", help="File has no header line")
    parser.add_argument("--min-info", type=float, default=0.8, help="Minimum INFO score")
    parser.add_argument("--max-pvalue", type=float, default=0.05, help="Maximum p-value")
    parser.add_argument("--min-maf", type=float, default=0.01, help="Minimum minor allele frequency")

    parser.add_argument("--min-k", type=int, default=clustering.min_k)
    parser.add_argument("--max-k", type=int, default=clustering.max_k)
    parser.add_argument("--k", type=int, default=None, help="Skip the K search and use this K")
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=clustering.final_max_iterations,
        help="Iteration cap for the final clustering (default: %(default)s)",
    )
    parser.add_argument("--seed", type=int, default=clustering.seed)
    parser.add_argument("--workers", type=int, default=clustering.n_workers)
    parser.add_argument(
        "--points-per-cluster",
        type=int,
        default=100,
        help="Points per synthetic blob (default: %(default)s)",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--log-level", default=clustering.log_level)
    return parser


def run(args: argparse.Namespace) -> dict:
    """Prepare points, pick K and cluster. Returns a JSON-ready report."""
    config = Config()
    config.clustering = ClusteringConfig(
        max_iterations=config.clustering.max_iterations,
        final_max_iterations=args.max_iterations,
        min_k=args.min_k,
        max_k=args.max_k,
        n_workers=args.workers,
        seed=args.seed,
        log_level=args.log_level,
    )
    service = ClusteringService(config, random_state=args.seed)

    if args.synthetic is not None:
        points = generate_clustered_data(
            args.synthetic, args.points_per_cluster, 2, random_state=args.seed
        )
        feature_names = ["x", "y"]
    else:
        options = FilterOptions(
            min_info_score=args.min_info,
            max_p_value=args.max_pvalue,
            min_maf=args.min_maf,
            has_header=not args.no_header,
            selected_features=tuple(args.features),
            normalization_method=NormalizationMethod.from_name(args.normalization),
        )
        points = service.load_and_prepare_data(args.file, options)
        feature_names = list(options.selected_features)

    if args.k is not None:
        k = args.k
    else:
        k = service.determine_optimal_k(points)

    clusters = service.perform_clustering(points, k)
    summaries = service.analyze_clusters(clusters, feature_names)

    return {
        "n_points": len(points),
        "optimal_k": k,
        "inertia_by_k": {str(key): v for key, v in service.inertia_values.items()},
        "silhouette_by_k": {str(key): v for key, v in service.silhouette_scores.items()},
        "clusters": [s.to_dict() for s in summaries],
    }


def format_report(report: dict) -> str:
    lines = [f"Points: {report['n_points']}", f"K: {report['optimal_k']}"]
    if report["inertia_by_k"]:
        lines.append("")
        lines.append(f"{'K':>4}  {'inertia':>14}  {'silhouette':>10}")
        for key, value in report["inertia_by_k"].items():
            lines.append(
                f"{key:>4}  {value:>14.4f}  {report['silhouette_by_k'][key]:>10.4f}"
            )
    for c in report["clusters"]:
        lines.append("")
        lines.append(
            f"Cluster {c['cluster_id']}: {c['size']} points, "
            f"mean distance to centroid {c['mean_distance_to_centroid']:.4f}"
        )
        for name, value in c["centroid"].items():
            lines.append(f"  {name:<14} {value:>12.4f}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        report = run(args)
    except (GwasKMeansError, FileNotFoundError) as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(format_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())

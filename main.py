"""
Основной скрипт для управления полным циклом работы с кластеризацией.

Поддерживает три режима работы:
1. Генерация синтетических CSV-датасетов
2. Кластеризация (делегирует CLI пакета lloyd)
3. Визуализация результата
"""

import argparse
import sys
from pathlib import Path

from lloyd.main import main as cluster_main
from scripts.generate_datasets import DatasetGenerator
from scripts.visualize_result import visualize_result


def run_datasets_generation(datasets_dir: Path, seed: int = 42) -> None:
    """Генерирует синтетические датасеты из набора PRESETS."""
    print("=" * 80)
    print("ГЕНЕРАЦИЯ ДАТАСЕТОВ")
    print("=" * 80)
    DatasetGenerator(base_seed=seed, datasets_dir=datasets_dir).generate_all()


def run_visualization(points: str, result_json: Path, output_dir: Path) -> None:
    print("=" * 80)
    print("ВИЗУАЛИЗАЦИЯ РЕЗУЛЬТАТА")
    print("=" * 80)
    visualize_result(points, result_json, output_dir)


def main() -> None:
    """Основная функция управления полным циклом работы."""
    parser = argparse.ArgumentParser(
        description="Управление полным циклом работы с кластеризацией K-means",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:

  # Генерация датасетов
  python main.py datasets

  # Лучший из 1000 перезапусков на 4 потоках
  python main.py cluster datasets/demo_2d.csv -k 4 --restarts 1000 --jobs 4 --output result.json

  # Графики по результату
  python main.py plot datasets/demo_2d.csv result.json
        """,
    )

    subparsers = parser.add_subparsers(dest="mode", help="Режим работы")

    datasets_parser = subparsers.add_parser("datasets", help="Генерация синтетических датасетов")
    datasets_parser.add_argument("--datasets-dir", type=Path, default=Path("datasets"))
    datasets_parser.add_argument("--seed", type=int, default=42)

    subparsers.add_parser(
        "cluster",
        help="Кластеризация (все аргументы передаются в lloyd)",
        add_help=False,
    )

    plot_parser = subparsers.add_parser("plot", help="Визуализация результата")
    plot_parser.add_argument("points", help="CSV-файл с точками")
    plot_parser.add_argument("result", type=Path, help="JSON, сохранённый lloyd --output")
    plot_parser.add_argument("--output-dir", type=Path, default=Path("visualizations"))

    # Аргументы режима cluster разбирает сам lloyd.main
    if len(sys.argv) > 1 and sys.argv[1] == "cluster":
        sys.exit(cluster_main(sys.argv[2:]))

    args = parser.parse_args()

    if args.mode == "datasets":
        run_datasets_generation(args.datasets_dir, args.seed)
    elif args.mode == "plot":
        run_visualization(args.points, args.result, args.output_dir)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

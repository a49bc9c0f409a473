"""
Утилиты и скрипты для работы с проектом lloyd.

Модули:
- generate_datasets: генерация синтетических CSV-датасетов
- visualize_result: визуализация результата кластеризации
"""

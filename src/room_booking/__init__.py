"""
Система бронирования аудиторий учреждения.

Ведет реестр клиентов, фиксированный каталог аудиторий и бронирования,
подбирает наиболее подходящую свободную аудиторию и сохраняет состояние
в файл после каждого изменения.
"""

__version__ = "0.1.0"

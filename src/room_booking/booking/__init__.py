"""
Модуль контекста бронирования (Booking Context).

Отвечает за бронирование аудиторий учреждения, включая:
- Регистрацию клиентов
- Подбор свободной аудитории по требованиям клиента
- Создание и отмену бронирований, отчеты
- Сохранение и восстановление состояния реестра
"""

from . import domain, interfaces, infrastructure, application

__all__ = [
    'domain',
    'application',
    'infrastructure',
    'interfaces',
]

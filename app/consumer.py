import json
import logging
import pika
import time
from typing import Dict, Any, List, Optional

from config.settings import get_app_config, get_rabbitmq_config
from app.exceptions import InvalidConfigurationError, TimetableError
from app.services.generator import generate_timetable
from app.services.slot_validator import SlotChange, apply_slot_change, validate_slot_change
from app.services.workload import get_teacher_workload
from app.models.timetable_data import TimetableData
from app.models.class_allocation import ClassAllocation
from app.models.class_group import ClassGroup
from app.models.global_settings import GlobalSettings
from app.models.subject import Priority, Subject
from app.models.teacher import Teacher, TimePreferences
from app.models.timetable_entry import TimetableEntry

logger = logging.getLogger(__name__)


def _require_int(value: Any, field_path: str, minimum: int = 1) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(field_path, f"expected an integer, got {value!r}")
    if value < minimum:
        raise InvalidConfigurationError(field_path, f"must be at least {minimum}, got {value}")
    return value


def _require_range(values: Any, field_path: str, upper: Optional[int]) -> frozenset:
    """Checks a list of 1-based indices, bounded by upper when it is known"""
    result = set()
    for i, value in enumerate(values or []):
        _require_int(value, f"{field_path}[{i}]")
        if upper is not None and value > upper:
            raise InvalidConfigurationError(f"{field_path}[{i}]", f"must be at most {upper}, got {value}")
        result.add(value)
    return frozenset(result)


def _parse_priority(value: Any, field_path: str) -> Priority:
    try:
        return Priority(value)
    except ValueError:
        raise InvalidConfigurationError(
            field_path, f"must be one of HIGH, MEDIUM, LOW, got {value!r}"
        ) from None


def parse_settings(data: Optional[Dict[str, Any]]) -> Optional[GlobalSettings]:
    """
    Converts the global settings of a request.

    Expected format:
    {"num_day_orders": 5, "hours_per_day": 7, "break_hours": [4]}

    Returns:
        GlobalSettings, or None when the settings were never configured
    """
    if not data:
        return None

    hours_per_day = _require_int(data.get("hours_per_day"), "settings.hours_per_day")
    return GlobalSettings(
        num_day_orders=_require_int(data.get("num_day_orders"), "settings.num_day_orders"),
        hours_per_day=hours_per_day,
        break_hours=_require_range(data.get("break_hours"), "settings.break_hours", hours_per_day),
    )


def parse_teachers(items: List[Dict[str, Any]], settings: Optional[GlobalSettings] = None) -> Dict[int, Teacher]:
    """
    Converts teachers of a request. Preferred days and hours are range
    checked only when settings are known.
    """
    num_day_orders = settings.num_day_orders if settings else None
    hours_per_day = settings.hours_per_day if settings else None

    teachers = {}
    for teacher in items:
        path = f"teachers[{teacher.get('id')}]"
        slots = teacher.get("preferred_time_slots") or {}
        teachers[teacher["id"]] = Teacher(
            id=teacher["id"],
            name=teacher["name"],
            max_hours_per_day=_require_int(teacher.get("max_hours_per_day"), f"{path}.max_hours_per_day"),
            preferred_day_orders=_require_range(
                teacher.get("preferred_day_orders"), f"{path}.preferred_day_orders", num_day_orders
            ),
            preferred_time_slots=TimePreferences(
                morning=bool(slots.get("morning", False)),
                afternoon=bool(slots.get("afternoon", False)),
                specific=_require_range(
                    slots.get("specific"), f"{path}.preferred_time_slots.specific", hours_per_day
                ),
            ),
        )
    return teachers


def parse_timetable_data(data: Dict[str, Any]) -> TimetableData:
    """
    Converts JSON data received from RabbitMQ into TimetableData structure.

    Args:
        data: Dictionary with the configuration stored by the backend

    Expected format:
    {
        "settings": {"num_day_orders": 5, "hours_per_day": 7, "break_hours": [4]},
        "classes": [{"id": 1, "name": "Grade 10-A"}, ...],
        "teachers": [{"id": 1, "name": "Prof. Silva", "max_hours_per_day": 5,
                      "preferred_day_orders": [1, 2],
                      "preferred_time_slots": {"morning": true, "afternoon": false,
                                               "specific": [2]}}, ...],
        "subjects": [{"id": 1, "name": "Mathematics", "class_id": 1,
                      "weekly_hours": 5, "priority": "HIGH"}, ...],
        "allocations": [{"id": 1, "subject_id": 1, "teacher_id": 1}, ...]
    }

    "subjects" is optional when every allocation already carries class_id,
    weekly_hours, priority and subject_name.

    Returns:
        Processed TimetableData

    Raises:
        InvalidConfigurationError: a value is out of range or a reference is unknown
    """
    settings = parse_settings(data.get("settings"))

    classes = [ClassGroup(id=cls["id"], name=cls["name"]) for cls in data.get("classes", [])]
    class_names = {cls.id: cls.name for cls in classes}

    teachers = parse_teachers(data.get("teachers", []), settings)

    # Parse Subjects
    subjects = {}
    for subject in data.get("subjects", []):
        path = f"subjects[{subject.get('id')}]"
        subjects[subject["id"]] = Subject(
            id=subject["id"],
            name=subject["name"],
            class_id=subject["class_id"],
            weekly_hours=_require_int(subject.get("weekly_hours"), f"{path}.weekly_hours"),
            priority=_parse_priority(subject.get("priority"), f"{path}.priority"),
        )

    # Parse Allocations, filling missing fields from the subject
    allocations = []
    bound_subjects = {}
    for allocation in data.get("allocations", []):
        path = f"allocations[{allocation.get('id')}]"
        subject_id = allocation["subject_id"]
        teacher_id = allocation["teacher_id"]
        subject = subjects.get(subject_id)

        if subject_id in bound_subjects:
            raise InvalidConfigurationError(
                f"{path}.subject_id",
                f"subject {subject_id} is already allocated by allocation {bound_subjects[subject_id]}",
            )
        bound_subjects[subject_id] = allocation.get("id")

        if teacher_id not in teachers:
            raise InvalidConfigurationError(f"{path}.teacher_id", f"unknown teacher {teacher_id}")

        class_id = allocation.get("class_id", subject.class_id if subject else None)
        if class_id not in class_names:
            raise InvalidConfigurationError(f"{path}.class_id", f"unknown class {class_id}")

        weekly_hours = allocation.get("weekly_hours", subject.weekly_hours if subject else None)
        priority = allocation.get("priority", subject.priority if subject else None)

        allocations.append(ClassAllocation(
            id=allocation["id"],
            subject_id=subject_id,
            teacher_id=teacher_id,
            class_id=class_id,
            weekly_hours=_require_int(weekly_hours, f"{path}.weekly_hours"),
            priority=_parse_priority(priority, f"{path}.priority"),
            subject_name=allocation.get("subject_name", subject.name if subject else str(subject_id)),
            class_name=allocation.get("class_name", class_names[class_id]),
            teacher_name=teachers[teacher_id].name,
        ))

    return TimetableData(
        settings=settings,
        classes=classes,
        teachers=teachers,
        allocations=allocations,
    )


def parse_timetable_entries(items: List[Dict[str, Any]]) -> List[TimetableEntry]:
    return [TimetableEntry.from_dict(item) for item in items]


def parse_slot_change(data: Dict[str, Any]) -> SlotChange:
    return SlotChange(
        class_id=data["class_id"],
        day_order=data["day_order"],
        hour=data["hour"],
        subject_id=data.get("subject_id"),
        teacher_id=data.get("teacher_id"),
        subject_name=data.get("subject_name"),
    )


def process_generate_timetable(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Processes timetable generation request.

    Args:
        data: Configuration to generate the timetable from

    Returns:
        Dictionary with the generated timetable and statistics
    """
    try:
        logger.info("Starting timetable generation...")

        timetable_data = parse_timetable_data(data)

        logger.info(f"Data parsed: {len(timetable_data.allocations)} allocations, "
                    f"{len(timetable_data.classes)} classes, "
                    f"{len(timetable_data.teachers)} teachers")

        result = generate_timetable(timetable_data)

        if not result.success:
            return {"status": "error", "message": result.error}

        from app.utils.costs import check_hard_constraints
        from app.utils.utils import show_statistics
        hard_constraints_cost, _ = check_hard_constraints(result.entries, timetable_data)
        show_statistics(result.stats, hard_constraints_cost)

        return {
            "status": "success",
            "message": "Timetable generated successfully",
            "data": {
                "timetable": [entry.as_dict() for entry in result.entries],
                "stats": {
                    **result.stats,
                    "hard_constraints_satisfied": hard_constraints_cost == 0,
                },
            },
        }

    except TimetableError as e:
        logger.warning(f"Rejected generation request: {e}")
        return {"status": "error", "message": str(e)}

    except Exception as e:
        logger.error(f"Error generating timetable: {e}", exc_info=True)
        return {
            "status": "error",
            "message": f"Error generating timetable: {str(e)}"
        }


def process_validate_slot_change(data: Dict[str, Any]) -> Dict[str, Any]:
    """Checks a manual edit against the persisted timetable sent along"""
    try:
        change = parse_slot_change(data["change"])
        timetable = parse_timetable_entries(data.get("timetable", []))
        teachers = parse_teachers(data.get("teachers", []))

        validation = validate_slot_change(change, timetable, teachers)
        return {"status": "success", "data": validation.as_dict()}

    except Exception as e:
        logger.error(f"Error validating slot change: {e}", exc_info=True)
        return {"status": "error", "message": f"Error validating slot change: {str(e)}"}


def process_update_timetable_slot(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validates a manual edit and returns the timetable to store"""
    try:
        change = parse_slot_change(data["change"])
        timetable = parse_timetable_entries(data.get("timetable", []))
        teachers = parse_teachers(data.get("teachers", []))

        updated = apply_slot_change(change, timetable, teachers)
        return {
            "status": "success",
            "data": {"timetable": [entry.as_dict() for entry in updated]},
        }

    except ValueError as e:
        return {"status": "error", "message": str(e)}

    except Exception as e:
        logger.error(f"Error updating slot: {e}", exc_info=True)
        return {"status": "error", "message": f"Error updating slot: {str(e)}"}


def process_get_teacher_workload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Summarizes the load of every teacher in the persisted timetable sent along"""
    try:
        settings = parse_settings(data.get("settings"))
        num_day_orders = settings.num_day_orders if settings else get_app_config()["default_day_orders"]
        timetable = parse_timetable_entries(data.get("timetable", []))
        teachers = parse_teachers(data.get("teachers", []))

        workload = get_teacher_workload(timetable, teachers.values(), num_day_orders)
        return {"status": "success", "data": [item.as_dict() for item in workload]}

    except Exception as e:
        logger.error(f"Error computing teacher workload: {e}", exc_info=True)
        return {"status": "error", "message": f"Error computing teacher workload: {str(e)}"}


COMMANDS = {
    "generate_timetable": process_generate_timetable,
    "validate_slot_change": process_validate_slot_change,
    "update_timetable_slot": process_update_timetable_slot,
    "get_teacher_workload": process_get_teacher_workload,
}


def send_reply(ch, properties, result: Dict[str, Any]):
    if not properties.reply_to:
        return
    ch.basic_publish(
        exchange="",
        routing_key=properties.reply_to,
        properties=pika.BasicProperties(correlation_id=properties.correlation_id),
        body=json.dumps(result),
    )


def callback(ch, method, properties, body):
    """Message callback - processes the command and replies on reply_to"""
    correlation_id = properties.correlation_id

    try:
        logger.info(f"Received message: {correlation_id}")
        message = json.loads(body)
        command = message.get("pattern")

        if command == "test_connection":
            result = {"status": "success", "message": "Connection established"}

        elif command in COMMANDS:
            logger.info(f"Processing {command} request")
            result = COMMANDS[command](message.get("data") or {})

        else:
            result = {"status": "error", "message": f"Unknown command: {command}"}

        send_reply(ch, properties, result)
        if properties.reply_to:
            logger.info(f"Response sent for correlation_id: {correlation_id}")

    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in message: {e}")

    except Exception as e:
        logger.error(f"Unexpected error in callback: {e}", exc_info=True)

    finally:
        try:
            ch.basic_ack(delivery_tag=method.delivery_tag)
        except Exception as e:
            logger.warning(f"Error acknowledging message: {e}")


def create_connection_and_channel(rabbitmq_config):
    """Create RabbitMQ connection and channel with proper configuration"""
    connection_params = pika.ConnectionParameters(
        host=rabbitmq_config["host"],
        port=rabbitmq_config["port"],
        virtual_host=rabbitmq_config["vhost"],
        credentials=pika.PlainCredentials(
            username=rabbitmq_config["username"], password=rabbitmq_config["password"]
        ),
        heartbeat=rabbitmq_config["heartbeat"],
        blocked_connection_timeout=300,
        socket_timeout=10,
        connection_attempts=rabbitmq_config["connection_attempts"],
        retry_delay=rabbitmq_config["retry_delay"],
    )

    connection = pika.BlockingConnection(connection_params)
    channel = connection.channel()

    # Configure channel
    queue_name = rabbitmq_config["queue_name"]
    channel.queue_declare(queue=queue_name, durable=True)
    channel.basic_qos(prefetch_count=1)

    return connection, channel, queue_name


def start_consumer():
    """Start the RabbitMQ consumer with reconnection logic"""
    rabbitmq_config = get_rabbitmq_config()
    max_reconnect_attempts = rabbitmq_config["max_reconnect_attempts"]
    reconnect_delay = 5
    current_attempt = 0

    while current_attempt < max_reconnect_attempts:
        connection = None
        channel = None

        try:
            logger.info(
                f"Starting consumer (attempt {current_attempt + 1}/{max_reconnect_attempts})"
            )

            connection, channel, queue_name = create_connection_and_channel(
                rabbitmq_config
            )

            # Reset attempt counter on successful connection
            current_attempt = 0

            channel.basic_consume(queue=queue_name, on_message_callback=callback)

            logger.info(f"Consumer started, listening on queue: {queue_name}")
            channel.start_consuming()

        except pika.exceptions.StreamLostError as e:
            logger.error(
                f"Connection lost: {e}. Attempt {current_attempt + 1}/{max_reconnect_attempts}"
            )
            current_attempt += 1

        except pika.exceptions.AMQPConnectionError as e:
            logger.error(
                f"AMQP Connection error: {e}. Attempt {current_attempt + 1}/{max_reconnect_attempts}"
            )
            current_attempt += 1

        except KeyboardInterrupt:
            logger.info("Shutdown signal received, stopping consumer...")
            break

        except Exception as e:
            logger.error(
                f"Unexpected error: {e}. Attempt {current_attempt + 1}/{max_reconnect_attempts}",
                exc_info=True,
            )
            current_attempt += 1

        finally:
            try:
                if channel and not channel.is_closed:
                    channel.stop_consuming()
                    channel.close()
            except Exception as e:
                logger.warning(f"Error closing channel: {e}")

            try:
                if connection and not connection.is_closed:
                    connection.close()
            except Exception as e:
                logger.warning(f"Error closing connection: {e}")

        if current_attempt < max_reconnect_attempts:
            logger.info(f"Reconnecting in {reconnect_delay} seconds...")
            time.sleep(reconnect_delay)
            # Exponential backoff with max delay of 60 seconds
            reconnect_delay = min(reconnect_delay * 1.5, 60)

    logger.error(
        f"Max reconnection attempts ({max_reconnect_attempts}) reached. Exiting."
    )


if __name__ == "__main__":
    start_consumer()

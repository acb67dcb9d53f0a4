from __future__ import annotations

import logging

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..users.mysql_user_repository import MySQLUserRepository
from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

# Idempotent: safe to apply on every start. The UNIQUE keys are what
# actually guarantee one roll number per class and one mark per day.
SCHEMA: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id INT AUTO_INCREMENT PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        email VARCHAR(150) NOT NULL UNIQUE,
        password_hash VARCHAR(255) NOT NULL,
        role ENUM('ADMIN','TEACHER','STUDENT') NOT NULL DEFAULT 'STUDENT',
        phone VARCHAR(30) NULL,
        is_active TINYINT(1) NOT NULL DEFAULT 1,
        created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS classes (
        class_id INT AUTO_INCREMENT PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        section VARCHAR(50) NULL,
        subject VARCHAR(100) NOT NULL,
        teacher_id INT NULL,
        UNIQUE KEY uq_class_name_subject_teacher (name, subject, teacher_id),
        FOREIGN KEY (teacher_id) REFERENCES users(user_id) ON DELETE SET NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS students (
        student_id INT AUTO_INCREMENT PRIMARY KEY,
        user_id INT NULL,
        roll_no VARCHAR(50) NOT NULL,
        class_id INT NOT NULL,
        address VARCHAR(500) NULL,
        is_active TINYINT(1) NOT NULL DEFAULT 1,
        UNIQUE KEY uq_student_roll_class (roll_no, class_id),
        UNIQUE KEY uq_student_user (user_id),
        FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE,
        FOREIGN KEY (class_id) REFERENCES classes(class_id) ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS attendance (
        attendance_id INT AUTO_INCREMENT PRIMARY KEY,
        student_id INT NOT NULL,
        class_id INT NOT NULL,
        teacher_id INT NOT NULL,
        attendance_date DATE NOT NULL,
        status ENUM('PRESENT','ABSENT') NOT NULL,
        UNIQUE KEY uq_attendance_student_class_date (student_id, class_id, attendance_date),
        FOREIGN KEY (student_id) REFERENCES students(student_id) ON DELETE CASCADE,
        FOREIGN KEY (class_id) REFERENCES classes(class_id) ON DELETE CASCADE
    )
    """,
)


def apply_schema(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
    )
    try:
        cur = conn.cursor()
        try:
            cur.execute(f"CREATE DATABASE IF NOT EXISTS `{target.database}`")
            cur.execute(f"USE `{target.database}`")
            for stmt in SCHEMA:
                cur.execute(stmt)
            conn.commit()
        finally:
            cur.close()
    finally:
        conn.close()

    logger.info("schema ready on %s@%s/%s", target.user, target.host, target.database)


def ensure_admin(db_config: dict, *, email: str, password: str, name: str = "Administrator") -> int:
    """Create the first ADMIN account if ``email`` is not registered yet; return its id.

    Only admins can create users through the API, so a fresh install needs one.
    """

    users = MySQLUserRepository(DatabaseConnection(DBConfig.from_dict(db_config)))
    existing = users.get_by_email(email.strip().lower())
    if existing:
        return existing.user_id

    user_id = users.create_user(
        name=name,
        email=email.strip().lower(),
        password_hash=generate_password_hash(password),
        role=Role.ADMIN,
    )
    logger.info("admin account created user_id=%s", user_id)
    return user_id

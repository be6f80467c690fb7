"""
Database Schema Reference
=========================

This file provides a quick reference for all database tables and columns.
For actual SQLAlchemy models, see: stt_service/db/models.py

"""

# ============================================================================
# API_KEYS - Stores API keys for authentication
# ============================================================================
#
# | Column       | Type              | Constraints                    |
# |--------------|-------------------|--------------------------------|
# | id           | VARCHAR(36)       | PRIMARY KEY                    |
# | key_hash     | VARCHAR(255)      | NOT NULL, UNIQUE               |
# | key_prefix   | VARCHAR(12)       | NOT NULL, INDEX                |
# | name         | VARCHAR(100)      | NOT NULL                       |
# | owner        | VARCHAR(100)      | NOT NULL, INDEX (user id)      |
# | is_active    | BOOLEAN           | NOT NULL, DEFAULT TRUE         |
# | created_at   | TIMESTAMP(TZ)     | NOT NULL, DEFAULT now()        |
# | expires_at   | TIMESTAMP(TZ)     | NULLABLE                       |
#
# The owner of the key is the user every job operation runs as.


# ============================================================================
# STT_JOBS - One transcription request and its result
# ============================================================================
#
# | Column           | Type                | Constraints                   |
# |------------------|---------------------|-------------------------------|
# | id               | VARCHAR(36)         | PRIMARY KEY (uuid4)           |
# | user_id          | VARCHAR(100)        | NOT NULL, INDEX               |
# | input_audio_url  | TEXT                | NOT NULL                      |
# | audio_format     | VARCHAR(20)         | NULLABLE                      |
# | language         | VARCHAR(20)         | NULLABLE                      |
# | model_name       | VARCHAR(100)        | NULLABLE                      |
# | transcript_text  | TEXT                | NULLABLE                      |
# | duration_seconds | FLOAT               | NULLABLE                      |
# | word_count       | INTEGER             | NULLABLE                      |
# | status           | ENUM(SttJobStatus)  | NULLABLE                      |
# | error_message    | TEXT                | NULLABLE                      |
# | created_at       | TIMESTAMP(TZ)       | NOT NULL, DEFAULT now(), INDEX|
# | completed_at     | TIMESTAMP(TZ)       | NULLABLE                      |
#
# Enums:
#   SttJobStatus: 'queued' | 'processing' | 'completed' | 'failed'
#
# Relationships:
#   - segments: ONE-TO-MANY -> stt_segments.job_id


# ============================================================================
# STT_SEGMENTS - Timed transcript fragments (immutable once inserted)
# ============================================================================
#
# | Column             | Type          | Constraints                      |
# |--------------------|---------------|----------------------------------|
# | id                 | VARCHAR(36)   | PRIMARY KEY (uuid4)              |
# | job_id             | VARCHAR(36)   | NOT NULL, FK(stt_jobs.id), INDEX |
# | order_index        | INTEGER       | NOT NULL (> 0, sort key only)    |
# | start_time_seconds | FLOAT         | NULLABLE                         |
# | end_time_seconds   | FLOAT         | NULLABLE                         |
# | text               | TEXT          | NOT NULL                         |
# | speaker_label      | VARCHAR(100)  | NULLABLE                         |
# | confidence         | FLOAT         | NULLABLE (0..1)                  |
# | created_at         | TIMESTAMP(TZ) | NOT NULL, DEFAULT now()          |
#
# Relationships:
#   - job: MANY-TO-ONE -> stt_jobs.id


# ============================================================================
# COMMON QUERIES
# ============================================================================
#
# Owned job lookup (get / update / append):
#   SELECT * FROM stt_jobs WHERE id = :id AND user_id = :user_id;
#
# Merge update (only supplied columns appear in SET):
#   UPDATE stt_jobs SET status = :status
#   WHERE id = :id AND user_id = :user_id;
#
# Segments of a job:
#   SELECT * FROM stt_segments WHERE job_id = :job_id
#   ORDER BY order_index ASC, created_at ASC;
#
# Page of a user's jobs:
#   SELECT * FROM stt_jobs WHERE user_id = :user_id
#   ORDER BY created_at DESC LIMIT :page_size OFFSET (:page - 1) * :page_size;

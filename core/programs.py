"""Canned microcontroller programs for the editor, plus a cosmetic verify check.

Programs are shown and edited as text only; nothing here parses or runs them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

DEFAULT_PROGRAM = """\
void setup() {
  // Initialize sensors and motors
  pinMode(A0, INPUT); // Left sensor
  pinMode(A1, INPUT); // Center-left sensor
  pinMode(A2, INPUT); // Center sensor
  pinMode(A3, INPUT); // Center-right sensor
  pinMode(A4, INPUT); // Right sensor

  pinMode(9, OUTPUT);  // Left motor
  pinMode(10, OUTPUT); // Right motor
}

void loop() {
  // Read sensor values (0-1023)
  int leftSensor = analogRead(A0);
  int centerLeftSensor = analogRead(A1);
  int centerSensor = analogRead(A2);
  int centerRightSensor = analogRead(A3);
  int rightSensor = analogRead(A4);

  // Simple line following logic
  if (centerSensor < 500) {
    // On line - go straight
    analogWrite(9, 200);  // Left motor
    analogWrite(10, 200); // Right motor
  } else if (leftSensor < 500 || centerLeftSensor < 500) {
    // Line to the left - turn left
    analogWrite(9, 100);  // Slow left motor
    analogWrite(10, 255); // Fast right motor
  } else if (rightSensor < 500 || centerRightSensor < 500) {
    // Line to the right - turn right
    analogWrite(9, 255);  // Fast left motor
    analogWrite(10, 100); // Slow right motor
  } else {
    // Lost line - stop
    analogWrite(9, 0);
    analogWrite(10, 0);
  }

  delay(10);
}
"""

BASIC_PROGRAM = """\
void setup() {
  pinMode(A2, INPUT); // Center sensor
  pinMode(9, OUTPUT); // Left motor
  pinMode(10, OUTPUT); // Right motor
}

void loop() {
  int centerSensor = analogRead(A2);

  if (centerSensor < 500) {
    // On black line
    analogWrite(9, 150);
    analogWrite(10, 150);
  } else {
    // Off line - stop
    analogWrite(9, 0);
    analogWrite(10, 0);
  }

  delay(50);
}
"""

PID_PROGRAM = """\
// PID Line Following
float Kp = 0.5;
float Ki = 0.0;
float Kd = 0.1;
float lastError = 0;
float integral = 0;

void setup() {
  pinMode(A0, INPUT); // Left sensor
  pinMode(A1, INPUT); // Center-left sensor
  pinMode(A2, INPUT); // Center sensor
  pinMode(A3, INPUT); // Center-right sensor
  pinMode(A4, INPUT); // Right sensor

  pinMode(9, OUTPUT); // Left motor
  pinMode(10, OUTPUT); // Right motor
}

void loop() {
  // Read sensors
  int s0 = analogRead(A0);
  int s1 = analogRead(A1);
  int s2 = analogRead(A2);
  int s3 = analogRead(A3);
  int s4 = analogRead(A4);

  // Calculate position (-2 to +2)
  float position = 0;
  int count = 0;

  if (s0 < 500) { position += -2; count++; }
  if (s1 < 500) { position += -1; count++; }
  if (s2 < 500) { position += 0; count++; }
  if (s3 < 500) { position += 1; count++; }
  if (s4 < 500) { position += 2; count++; }

  if (count > 0) position /= count;

  // PID calculation
  float error = position;
  integral += error;
  float derivative = error - lastError;
  float output = Kp * error + Ki * integral + Kd * derivative;

  // Motor control
  int baseSpeed = 150;
  int leftSpeed = baseSpeed + output;
  int rightSpeed = baseSpeed - output;

  // Constrain speeds
  leftSpeed = constrain(leftSpeed, 0, 255);
  rightSpeed = constrain(rightSpeed, 0, 255);

  analogWrite(9, leftSpeed);
  analogWrite(10, rightSpeed);

  lastError = error;
  delay(10);
}
"""

ADVANCED_PROGRAM = """\
// Advanced Line Following with State Machine
enum RobotState {
  FOLLOWING,
  SEARCHING_LEFT,
  SEARCHING_RIGHT,
  LOST
};

RobotState currentState = FOLLOWING;
unsigned long stateStartTime = 0;
float Kp = 0.6, Ki = 0.0, Kd = 0.2;
float lastError = 0, integral = 0;

void setup() {
  // Initialize sensors
  for(int i = 0; i < 5; i++) {
    pinMode(A0 + i, INPUT);
  }

  pinMode(9, OUTPUT);  // Left motor
  pinMode(10, OUTPUT); // Right motor

  Serial.begin(9600);
}

void loop() {
  int sensors[5];
  for(int i = 0; i < 5; i++) {
    sensors[i] = analogRead(A0 + i);
  }

  float position = calculatePosition(sensors);
  bool lineDetected = isLineDetected(sensors);

  switch(currentState) {
    case FOLLOWING:
      if(lineDetected) {
        pidControl(position);
      } else {
        currentState = SEARCHING_LEFT;
        stateStartTime = millis();
      }
      break;

    case SEARCHING_LEFT:
      analogWrite(9, 100);
      analogWrite(10, 200);
      if(lineDetected) {
        currentState = FOLLOWING;
      } else if(millis() - stateStartTime > 500) {
        currentState = SEARCHING_RIGHT;
        stateStartTime = millis();
      }
      break;

    case SEARCHING_RIGHT:
      analogWrite(9, 200);
      analogWrite(10, 100);
      if(lineDetected) {
        currentState = FOLLOWING;
      } else if(millis() - stateStartTime > 1000) {
        currentState = LOST;
      }
      break;

    case LOST:
      analogWrite(9, 0);
      analogWrite(10, 0);
      break;
  }

  delay(10);
}

float calculatePosition(int sensors[]) {
  float weighted_sum = 0;
  int sum = 0;

  for(int i = 0; i < 5; i++) {
    if(sensors[i] < 500) {
      weighted_sum += (i - 2) * 1000;
      sum += 1000;
    }
  }

  return sum > 0 ? weighted_sum / sum : 0;
}

bool isLineDetected(int sensors[]) {
  for(int i = 0; i < 5; i++) {
    if(sensors[i] < 500) return true;
  }
  return false;
}

void pidControl(float position) {
  float error = position;
  integral += error;
  float derivative = error - lastError;
  float output = Kp * error + Ki * integral + Kd * derivative;

  int baseSpeed = 150;
  int leftSpeed = constrain(baseSpeed + output, 0, 255);
  int rightSpeed = constrain(baseSpeed - output, 0, 255);

  analogWrite(9, leftSpeed);
  analogWrite(10, rightSpeed);

  lastError = error;
}
"""

PROGRAM_TEMPLATES: Dict[str, str] = {
    "default": DEFAULT_PROGRAM,
    "basic": BASIC_PROGRAM,
    "pid": PID_PROGRAM,
    "advanced": ADVANCED_PROGRAM,
}

REQUIRED_FUNCTIONS = ("void setup()", "void loop()")


@dataclass
class ProgramCheck:
    missing: List[str] = field(default_factory=list)
    line_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.missing

    @property
    def message(self) -> str:
        if self.ok:
            return "Code compiled successfully!"
        return "Compilation error: missing " + ", ".join(self.missing)


def get_program_template(name: str) -> str:
    if name not in PROGRAM_TEMPLATES:
        raise KeyError(f"Unknown program template '{name}' (available: {', '.join(list_program_templates())})")
    return PROGRAM_TEMPLATES[name]


def list_program_templates() -> List[str]:
    return list(PROGRAM_TEMPLATES)


def check_program(text: str) -> ProgramCheck:
    """Substring check for the two entry points; the text is never compiled."""
    missing = [signature for signature in REQUIRED_FUNCTIONS if signature not in text]
    return ProgramCheck(missing=missing, line_count=len(text.split("\n")))


__all__ = [
    "DEFAULT_PROGRAM",
    "PROGRAM_TEMPLATES",
    "ProgramCheck",
    "check_program",
    "get_program_template",
    "list_program_templates",
]

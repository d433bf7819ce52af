import cv2

def open_camera(index: int = 0) -> cv2.VideoCapture:
     cap = cv2.VideoCapture(index)
     if not cap.isOpened() and index != 0:
          cap = cv2.VideoCapture(0)
     if not cap.isOpened():
          raise RuntimeError(f"Camera not opened. Try changing index (0/1/2), tried {index}.")
     return cap

def main():
     cap = open_camera(0)
     
     print("Camera test. Press 'q' to quit.")
     try:
          while True:
               ok, frame = cap.read()
               if not ok:
                    print("Failed to read frame.")
                    break

               cv2.imshow("Camera Test", frame)
               if (cv2.waitKey(1) & 0xFF) == ord("q"):
                    break
     finally:
          cap.release()
          cv2.destroyAllWindows()


if __name__ == "__main__":
     main()
